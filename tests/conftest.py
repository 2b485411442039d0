import shlex
import sys

import pytest

from ci_analyzer.config import Settings

ENV_KEYS = [
    "BUILD_CMD", "TEST_CMD", "BUILD_SETUP_CMD", "SHELL_COMMANDS", "WORKSPACE", "BUILD_DIR",
    "SYSTEM_PROMPT", "REVIEW_EXTS", "MODEL_PATH", "LLAMA_HOST", "LLAMA_PORT",
    "LLAMA_SERVER_BIN", "LLAMA_THREADS", "CONTEXT_SIZE", "GITHUB_OUTPUT",
]


def py(code: str) -> str:
    """Command line running a Python snippet with the current interpreter."""
    return f"{shlex.quote(sys.executable)} -c {shlex.quote(code)}"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def factory(**overrides) -> Settings:
        values = {"workspace": tmp_path, "build_dir": tmp_path / "build"}
        values.update(overrides)
        return Settings(**values)

    return factory
