import re
from dataclasses import dataclass, field

WARNINGS_CAP = 30
FAILURES_CAP = 50


@dataclass(frozen=True)
class Rule:
    """What counts as an interesting line and how many of them to keep."""

    category: str
    include: re.Pattern
    exclude: tuple[re.Pattern, ...] = ()
    cap: int = 50
    sort: bool = False

    def matches(self, line: str) -> bool:
        if not self.include.search(line):
            return False
        return not any(pattern.search(line) for pattern in self.exclude)


@dataclass(frozen=True)
class FindingSet:
    category: str
    lines: tuple[str, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


WARNINGS_RULE = Rule(
    category="warnings",
    include=re.compile(r"(warning|error):"),
    exclude=(
        re.compile(r"^In file included"),
        re.compile(r"note:"),
        re.compile(r"declared here"),
    ),
    cap=WARNINGS_CAP,
    sort=True,
)

FAILURES_RULE = Rule(
    category="failures",
    include=re.compile(r"(FAILED|ERROR|FAIL)"),
    cap=FAILURES_CAP,
)


def classify(log_text: str, rule: Rule) -> FindingSet:
    # only "\n" ends a line, form feeds and other separators stay inside it
    lines = (line.rstrip("\r") for line in log_text.split("\n"))
    selected = [line for line in lines if rule.matches(line)]

    # dict keeps first-seen order
    unique = list(dict.fromkeys(selected))
    if rule.sort:
        unique.sort()

    return FindingSet(rule.category, tuple(unique[: rule.cap]))
