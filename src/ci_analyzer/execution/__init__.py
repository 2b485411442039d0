from ci_analyzer.execution.runner import ExecutionResult, run_command, run_steps

__all__ = ["ExecutionResult", "run_command", "run_steps"]
