from pathlib import Path

from git import Repo
from git.exc import GitError

MAX_DIFF_LINES = 500
NO_DIFF = "No diff available"
UNKNOWN_COMMIT = "unknown"


class RepoManager:
    """Read-only view of the project checkout being analyzed."""

    def __init__(self, path: str | Path = "."):
        self.path = Path(path)

    def _repo(self) -> Repo:
        return Repo(self.path, search_parent_directories=True)

    def short_commit(self) -> str:
        try:
            return self._repo().git.rev_parse("--short", "HEAD")
        except GitError:
            return UNKNOWN_COMMIT

    def latest_diff(self, globs: list[str], max_lines: int = MAX_DIFF_LINES) -> str:
        """Patch of the most recent commit, limited to added/copied/modified/renamed files."""
        try:
            diff = self._repo().git.diff(
                "HEAD~1", "--stat", "--diff-filter=ACMR", "-p", "--", *globs
            )
        except GitError:
            return NO_DIFF

        if not diff.strip():
            return NO_DIFF

        return "\n".join(diff.splitlines()[:max_lines])
