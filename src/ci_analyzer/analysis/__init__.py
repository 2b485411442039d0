from ci_analyzer.analysis.classifier import (
    FAILURES_RULE,
    WARNINGS_RULE,
    FindingSet,
    Rule,
    classify,
)

__all__ = ["FAILURES_RULE", "WARNINGS_RULE", "FindingSet", "Rule", "classify"]
