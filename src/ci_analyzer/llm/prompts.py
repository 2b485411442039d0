from ci_analyzer.llm.schemas import AnalysisMode

BUILD_FAILURE_PROMPT = """\
The build failed with these compiler errors/warnings. Diagnose the root cause and suggest a minimal fix for each issue. Only suggest changes you are confident about.

Build output:
{context}"""

TEST_FAILURE_PROMPT = """\
These tests failed. Analyze the failures, identify likely root causes, and suggest minimal fixes. If you cannot determine the cause, say so.

Test output:
{context}"""

WARNINGS_PROMPT = """\
The build succeeded but produced these warnings. For each warning, explain whether it could cause bugs and suggest a fix if appropriate. Ignore trivial warnings from third-party code.

Warnings:
{context}"""

REVIEW_PROMPT = """\
Review the following code changes for bugs, undefined behavior, race conditions, or logic errors. Be concise, only flag real issues, not style nits.

Diff:
{context}"""

PROMPTS = {
    AnalysisMode.BUILD_FAILURE: BUILD_FAILURE_PROMPT,
    AnalysisMode.TEST_FAILURE: TEST_FAILURE_PROMPT,
    AnalysisMode.WARNINGS: WARNINGS_PROMPT,
    AnalysisMode.REVIEW: REVIEW_PROMPT,
}


def render_prompt(mode: AnalysisMode, context: str) -> str:
    return PROMPTS[mode].format(context=context)
