import pytest
from pydantic import ValidationError
from rich.console import Console

from ci_analyzer.config import RunMode
from ci_analyzer.llm.schemas import AnalysisMode
from ci_analyzer.report import FOOTER, Report, emit_report, print_report, render_body, render_outputs


def make_report(**overrides) -> Report:
    values = dict(
        issue_type=AnalysisMode.BUILD_FAILURE,
        commit="abc1234",
        mode=RunMode.AUTO,
        build_ok=False,
        test_ok=True,
        analysis="Add the missing semicolon on line 10.",
    )
    values.update(overrides)
    return Report(**values)


class TestTitle:
    @pytest.mark.parametrize(
        "issue_type, title",
        [
            (AnalysisMode.BUILD_FAILURE, "Build failure on abc1234"),
            (AnalysisMode.TEST_FAILURE, "Test failure on abc1234"),
            (AnalysisMode.WARNINGS, "Compiler warnings on abc1234"),
            (AnalysisMode.REVIEW, "Code review for abc1234"),
        ],
    )
    def test_titles(self, issue_type, title):
        assert make_report(issue_type=issue_type).title == title

    def test_frozen(self):
        report = make_report()
        with pytest.raises(ValidationError):
            report.commit = "other"


class TestBody:
    def test_fields(self):
        body = render_body(make_report())
        assert body.startswith("## Build failure on abc1234\n")
        assert "**Commit:** `abc1234`" in body
        assert "**Mode:** auto" in body
        assert "**Build:** FAILED" in body
        assert "**Tests:** passed" in body
        assert "### Analysis\n\nAdd the missing semicolon on line 10.\n" in body
        assert body.endswith("---\n" + FOOTER)

    def test_review_of_green_build(self):
        body = render_body(make_report(issue_type=AnalysisMode.REVIEW, mode=RunMode.REVIEW, build_ok=True))
        assert "**Mode:** review" in body
        assert "**Build:** passed" in body


class TestOutputs:
    def test_key_value_block(self):
        lines = render_outputs(make_report(analysis="line one\nline two")).splitlines()
        assert lines[0] == "ISSUE_TITLE=Build failure on abc1234"
        assert lines[1] == "ISSUE_BODY<<EOF"
        assert lines[2] == "## Build failure on abc1234"
        assert "line one" in lines and "line two" in lines
        assert lines[-1] == "EOF"

    def test_bare_delimiter_in_analysis_cannot_close_body(self):
        lines = render_outputs(make_report(analysis="Fix:\nEOF\nstill analysis\nEOF")).splitlines()
        assert lines.count("EOF") == 1
        assert lines[-1] == "EOF"
        assert lines.count(" EOF") == 2
        assert "still analysis" in lines

    def test_delimiter_inside_a_line_is_untouched(self):
        body = render_body(make_report(analysis="reading past EOF in parser.c"))
        assert "reading past EOF in parser.c" in body

    def test_emit_to_stdout(self, capsys):
        report = make_report()
        emit_report(report)
        assert capsys.readouterr().out == render_outputs(report)

    def test_emit_appends_to_github_output(self, tmp_path, capsys):
        target = tmp_path / "github_output"
        target.write_text("previous=1\n")
        report = make_report()

        emit_report(report, target)

        assert target.read_text() == "previous=1\n" + render_outputs(report)


class TestConsole:
    def test_analysis_markup_is_not_interpreted(self):
        console = Console(record=True, width=100)
        print_report(make_report(analysis="use [bold]x[/bold] in vec[i]"), console)
        text = console.export_text()
        assert "Build failure on abc1234" in text
        assert "use [bold]x[/bold] in vec[i]" in text
