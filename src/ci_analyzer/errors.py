class AnalyzerError(Exception):
    """Fatal pipeline error: the run stops without producing a report."""


class SetupError(AnalyzerError):
    def __init__(self, command: str, output: str = ""):
        self.command = command
        self.output = output
        super().__init__(f"Setup command failed: {command}")


class ServerStartupError(AnalyzerError):
    pass


class InferenceError(AnalyzerError):
    pass
