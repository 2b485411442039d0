from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = (
    "You are a code reviewer. Focus on correctness, potential bugs, undefined behavior, "
    "race conditions, and logic errors. Be concise and precise. "
    "Only flag real issues, not style nits."
)

DEFAULT_REVIEW_EXTS = "*.cpp *.h *.hpp *.c *.py *.rs *.go *.java *.ts *.js"


class RunMode(str, Enum):
    AUTO = "auto"
    REVIEW = "review"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        protected_namespaces=("settings_",),
    )

    build_cmd: str | None = None
    test_cmd: str | None = None
    build_setup_cmd: str | None = None
    shell_commands: bool = False

    workspace: Path = Path(".")
    build_dir: Path = Path("/tmp/project-build")

    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    review_exts: str = DEFAULT_REVIEW_EXTS

    model_path: str = "/models/model.gguf"
    llama_host: str = "localhost"
    llama_port: int = 8012
    llama_server_bin: str = "llama-server"
    llama_threads: int = 2
    context_size: int = 4096

    github_output: Path | None = None

    @property
    def review_globs(self) -> list[str]:
        return self.review_exts.split()

    @property
    def llama_url(self) -> str:
        return f"http://{self.llama_host}:{self.llama_port}"


def get_settings(**overrides) -> Settings:
    return Settings(**overrides)
