import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

console = Console()

# Exit status a shell reports for a command it cannot find or execute
NOT_FOUND_STATUS = 127


@dataclass
class ExecutionResult:
    ok: bool
    output: str
    command: str
    ran: bool = True

    @classmethod
    def skipped(cls, command: str = "") -> "ExecutionResult":
        """A phase that never ran counts as passed."""
        return cls(ok=True, output="", command=command, ran=False)


def build_argv(command: str | list[str], shell: bool = False) -> list[str]:
    if not isinstance(command, str):
        return list(command)
    if shell:
        return ["bash", "-c", command]
    return shlex.split(command)


def _display(command: str | list[str]) -> str:
    return command if isinstance(command, str) else shlex.join(command)


def run_command(
    command: str | list[str],
    cwd: str | Path = ".",
    shell: bool = False,
    echo: bool = True,
) -> ExecutionResult:
    """Run a command, streaming combined stdout/stderr while capturing it."""
    display = _display(command)

    try:
        argv = build_argv(command, shell)
    except ValueError as e:
        return ExecutionResult(False, f"Cannot parse command: {e}", display)
    if not argv:
        return ExecutionResult(False, "Empty command", display)

    try:
        proc = subprocess.Popen(
            argv, cwd=cwd,
            stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
            text=True, errors="replace", bufsize=1,
        )
    except OSError as e:
        message = f"{argv[0]}: {e.strerror or e} (exit {NOT_FOUND_STATUS})\n"
        if echo:
            console.out(message, end="", highlight=False)
        return ExecutionResult(False, message, display)

    lines = []
    with proc:
        for line in proc.stdout:
            lines.append(line)
            if echo:
                console.out(line, end="", highlight=False)

    return ExecutionResult(proc.returncode == 0, "".join(lines), display)


def run_steps(
    commands: list[str | list[str]],
    cwd: str | Path = ".",
    shell: bool = False,
    echo: bool = True,
) -> ExecutionResult:
    """Run commands in order, stopping at the first failure; output is concatenated."""
    outputs = []
    executed = []

    for cmd in commands:
        result = run_command(cmd, cwd=cwd, shell=shell, echo=echo)
        outputs.append(result.output)
        executed.append(result.command)
        if not result.ok:
            return ExecutionResult(False, "".join(outputs), " && ".join(executed))

    return ExecutionResult(True, "".join(outputs), " && ".join(executed))
