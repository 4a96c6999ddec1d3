"""Abstract interface for the GitHub pull request queries contrib needs.

Only merged-PR lookup is required: it is the third signal for squash-merge
detection. Everything here degrades gracefully when ``gh`` is missing or not
authenticated; callers check ``is_available`` and skip the signal.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from contrib.gateway.github.types import MergedPullRequest


class GitHub(ABC):
    """Abstract interface for GitHub queries. All implementations must implement it."""

    @abstractmethod
    def is_available(self, cwd: Path) -> bool:
        """Check that ``gh`` is installed and authenticated."""
        ...

    @abstractmethod
    def get_merged_pr_for_branch(self, cwd: Path, branch: str) -> MergedPullRequest | None:
        """Find the most recent merged pull request whose head is ``branch``.

        Returns:
            MergedPullRequest, or None if there is none or the query fails
        """
        ...
