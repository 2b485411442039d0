import re
from pathlib import Path

import typer
from pydantic import BaseModel, ConfigDict
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ci_analyzer.config import RunMode
from ci_analyzer.llm.schemas import AnalysisMode

TITLE_KEY = "ISSUE_TITLE"
BODY_KEY = "ISSUE_BODY"
DELIMITER = "EOF"
FOOTER = "_Automated analysis by local LLM via llama.cpp_"

TITLES = {
    AnalysisMode.BUILD_FAILURE: "Build failure on {commit}",
    AnalysisMode.TEST_FAILURE: "Test failure on {commit}",
    AnalysisMode.WARNINGS: "Compiler warnings on {commit}",
    AnalysisMode.REVIEW: "Code review for {commit}",
}


class Report(BaseModel):
    """Outcome of one pipeline run that needed the model."""

    model_config = ConfigDict(frozen=True)

    issue_type: AnalysisMode
    commit: str
    mode: RunMode
    build_ok: bool
    test_ok: bool
    analysis: str

    @property
    def title(self) -> str:
        return TITLES[self.issue_type].format(commit=self.commit)


def _guard_delimiter(text: str) -> str:
    """Indent lines that would otherwise close the ISSUE_BODY heredoc early."""
    return re.sub(rf"^({DELIMITER}\r?)$", r" \1", text, flags=re.MULTILINE)


def _status(ok: bool) -> str:
    return "passed" if ok else "FAILED"


def render_body(report: Report) -> str:
    return f"""## {report.title}

**Commit:** `{report.commit}`
**Mode:** {report.mode.value}
**Build:** {_status(report.build_ok)}
**Tests:** {_status(report.test_ok)}

### Analysis

{_guard_delimiter(report.analysis)}

---
{FOOTER}"""


def render_outputs(report: Report) -> str:
    """Key/value block read by the calling workflow: one title line and a heredoc body."""
    lines = [
        f"{TITLE_KEY}={report.title}",
        f"{BODY_KEY}<<{DELIMITER}",
        render_body(report),
        DELIMITER,
    ]
    return "\n".join(lines) + "\n"


def print_report(report: Report, console: Console):
    subtitle = f"build {_status(report.build_ok)} | tests {_status(report.test_ok)}"
    console.print()
    console.print(
        Panel(
            Text(report.analysis),
            title=f"[bold]{report.title}[/bold]",
            subtitle=subtitle,
            border_style="red" if not (report.build_ok and report.test_ok) else "yellow",
        )
    )


def emit_report(report: Report, github_output: Path | None = None):
    block = render_outputs(report)
    typer.echo(block, nl=False)

    if github_output is not None:
        with open(github_output, "a", encoding="utf-8") as f:
            f.write(block)
