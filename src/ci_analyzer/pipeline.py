import os
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ci_analyzer.analysis import FAILURES_RULE, WARNINGS_RULE, FindingSet, classify
from ci_analyzer.config import RunMode, Settings
from ci_analyzer.errors import SetupError
from ci_analyzer.execution import ExecutionResult, run_command, run_steps
from ci_analyzer.llm import AnalysisMode, AnalysisRequest, LlamaClient, LlamaServer
from ci_analyzer.repo_manager import RepoManager
from ci_analyzer.report import Report, emit_report, print_report

console = Console()


class Stage(str, Enum):
    SETUP = "setup"
    BUILDING = "building"
    TESTING = "testing"
    DECIDING = "deciding"
    IDLE = "idle"
    STARTING_SERVER = "starting_server"
    ANALYZING = "analyzing"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


def default_build_steps(build_dir: Path) -> list[list[str]]:
    return [
        [
            "cmake", "-B", str(build_dir),
            "-DCMAKE_BUILD_TYPE=Release",
            "-DCMAKE_EXPORT_COMPILE_COMMANDS=ON",
        ],
        ["cmake", "--build", str(build_dir), f"-j{os.cpu_count() or 1}"],
    ]


def default_test_command(build_dir: Path) -> list[str]:
    return ["ctest", "--test-dir", str(build_dir), "--output-on-failure"]


def decide(mode: RunMode, build_ok: bool, test_ok: bool, warnings: FindingSet) -> AnalysisMode | None:
    """Pick the single analysis to run, or None when a clean auto run needs no model."""
    if mode is RunMode.REVIEW:
        return AnalysisMode.REVIEW
    if not build_ok:
        return AnalysisMode.BUILD_FAILURE
    if not test_ok:
        return AnalysisMode.TEST_FAILURE
    if warnings:
        return AnalysisMode.WARNINGS
    return None


class Pipeline:
    def __init__(
        self,
        settings: Settings,
        repo: RepoManager | None = None,
        server_factory=LlamaServer,
        client_factory=LlamaClient,
    ):
        self.settings = settings
        self.repo = repo or RepoManager(settings.workspace)
        self.server_factory = server_factory
        self.client_factory = client_factory
        self.stage = Stage.SETUP

    @property
    def build_dir(self) -> Path:
        return self.settings.workspace / self.settings.build_dir

    def run(self, mode: RunMode = RunMode.AUTO) -> int:
        """Build, test and, when needed, analyze. Returns the process exit code."""
        console.print(f"[bold]=== LLM code analysis (mode: {mode.value}) ===[/bold]")

        # 1. Optional setup, any failure is fatal
        self.setup()

        # 2. Build and collect warnings
        self.stage = Stage.BUILDING
        build = self.build()
        warnings = classify(build.output, WARNINGS_RULE)
        if not build.ok:
            console.print("[red]Build failed[/red]")

        # 3. Tests only make sense on a successful build
        self.stage = Stage.TESTING
        if build.ok:
            test = self.test()
        else:
            console.print("[yellow]Skipping tests because the build failed[/yellow]")
            test = ExecutionResult.skipped()
        failures = classify(test.output, FAILURES_RULE)
        if not test.ok:
            console.print("[red]Tests failed[/red]")

        # 4. Decide whether the model is needed at all
        self.stage = Stage.DECIDING
        issue_type = decide(mode, build.ok, test.ok, warnings)
        if issue_type is None:
            self.stage = Stage.IDLE
            console.print("[green]Build and tests passed cleanly. No issues found.[/green]")
            return 0

        request = self.make_request(issue_type, warnings, failures)

        # 5. Start the server only now, after build and test released their resources
        self.stage = Stage.STARTING_SERVER
        with self.server_factory(self.settings):
            self.stage = Stage.ANALYZING
            console.print(f"[blue]Analyzing {issue_type.value}...[/blue]")
            with self.client_factory(self.settings) as client:
                analysis = client.analyze(request)

        # 6. Report
        self.stage = Stage.REPORTING
        report = Report(
            issue_type=issue_type,
            commit=self.repo.short_commit(),
            mode=mode,
            build_ok=build.ok,
            test_ok=test.ok,
            analysis=analysis,
        )
        print_report(report, console)
        emit_report(report, self.settings.github_output)

        exit_code = 0 if build.ok and test.ok else 1
        self.stage = Stage.DONE if exit_code == 0 else Stage.FAILED
        return exit_code

    def setup(self):
        self.stage = Stage.SETUP
        command = self.settings.build_setup_cmd
        if not command:
            return

        console.print(f"[blue]Running setup: {escape(command)}[/blue]")
        result = self._run(command)
        if not result.ok:
            raise SetupError(result.command, result.output)

    def build(self) -> ExecutionResult:
        if self.settings.build_cmd:
            console.print("[blue]Building project...[/blue]")
            return self._run(self.settings.build_cmd)

        console.print("[blue]Building project (cmake)...[/blue]")
        return run_steps(default_build_steps(self.build_dir), cwd=self.settings.workspace)

    def test(self) -> ExecutionResult:
        if self.settings.test_cmd:
            console.print("[blue]Running tests...[/blue]")
            return self._run(self.settings.test_cmd)

        if self.build_dir.is_dir():
            console.print("[blue]Running tests (ctest)...[/blue]")
            return run_command(default_test_command(self.build_dir), cwd=self.settings.workspace)

        console.print("[yellow]No TEST_CMD and no cmake build directory, skipping tests[/yellow]")
        return ExecutionResult.skipped()

    def make_request(
        self,
        issue_type: AnalysisMode,
        warnings: FindingSet,
        failures: FindingSet,
    ) -> AnalysisRequest:
        if issue_type is AnalysisMode.REVIEW:
            context = self.repo.latest_diff(self.settings.review_globs)
        elif issue_type is AnalysisMode.TEST_FAILURE:
            context = failures.text
        else:
            # build failures are diagnosed from the same warning/error lines
            context = warnings.text
        return AnalysisRequest(mode=issue_type, context=context)

    def _run(self, command: str) -> ExecutionResult:
        return run_command(command, cwd=self.settings.workspace, shell=self.settings.shell_commands)
