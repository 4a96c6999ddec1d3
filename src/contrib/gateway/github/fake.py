"""Fake GitHub implementation for testing."""

from pathlib import Path

from contrib.gateway.github.abc import GitHub
from contrib.gateway.github.types import MergedPullRequest


class FakeGitHub(GitHub):
    """In-memory fake returning configured merged pull requests.

    This class has NO public setup methods. All state is provided via constructor.

    Mutation Tracking:
    -----------------
    - pr_queries: branches looked up via get_merged_pr_for_branch()
    """

    def __init__(
        self,
        *,
        available: bool = True,
        merged_prs: dict[str, MergedPullRequest] | None = None,
    ) -> None:
        """Create FakeGitHub.

        Args:
            available: Whether gh is installed and authenticated
            merged_prs: Mapping of branch name -> merged PR
        """
        self._available = available
        self._merged_prs = merged_prs if merged_prs is not None else {}
        self._pr_queries: list[str] = []

    def is_available(self, cwd: Path) -> bool:
        return self._available

    def get_merged_pr_for_branch(self, cwd: Path, branch: str) -> MergedPullRequest | None:
        self._pr_queries.append(branch)
        return self._merged_prs.get(branch)

    @property
    def pr_queries(self) -> list[str]:
        """Branches queried during the test. For test assertions only."""
        return self._pr_queries.copy()
