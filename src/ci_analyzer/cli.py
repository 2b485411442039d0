import signal
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ci_analyzer.config import RunMode, get_settings
from ci_analyzer.errors import AnalyzerError
from ci_analyzer.pipeline import Pipeline

app = typer.Typer(
    name="ci-analyze",
    help="Build and test a project, then ask a local LLM about whatever went wrong",
    add_completion=False,
)
err_console = Console(stderr=True)


def _terminate(signum, frame):
    # Unwinds through the pipeline so the llama.cpp server is always stopped
    raise SystemExit(128 + signum)


@app.command()
def run(
    mode: RunMode = typer.Argument(
        RunMode.AUTO,
        help="auto: analyze only failures and warnings; review: always review the latest commit",
    ),
    workspace: Path | None = typer.Option(
        None, "--workspace", "-w", help="Project checkout (default: WORKSPACE or current directory)"
    ),
):
    """Build the project, run its tests and emit ISSUE_TITLE/ISSUE_BODY for anything found."""
    overrides = {}
    if workspace is not None:
        overrides["workspace"] = workspace

    try:
        settings = get_settings(**overrides)
    except ValidationError as e:
        err_console.print(f"[red]ERROR: invalid configuration\n{escape(str(e))}[/red]")
        raise typer.Exit(1)

    signal.signal(signal.SIGTERM, _terminate)

    try:
        exit_code = Pipeline(settings).run(mode)
    except AnalyzerError as e:
        err_console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    raise typer.Exit(exit_code)


if __name__ == "__main__":
    app()
