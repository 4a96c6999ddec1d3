"""Value types for the GitHub gateway."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MergedPullRequest:
    """A merged pull request whose head branch matched a local branch."""

    number: int
    title: str
    url: str
