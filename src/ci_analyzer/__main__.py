from ci_analyzer.cli import app

app(prog_name="ci-analyze")
