"""Ahead/behind counts between a local ref and a base ref."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from contrib.gateway.git.abc import Git

Relationship = Literal["in-sync", "ahead-only", "behind-only", "diverged"]


@dataclass(frozen=True)
class Divergence:
    """Commits only on the local ref (ahead) and only on the base ref (behind).

    Recompute after any mutation; a stale value can justify an unsafe reset.
    """

    ahead: int
    behind: int

    @property
    def relationship(self) -> Relationship:
        if self.ahead == 0 and self.behind == 0:
            return "in-sync"
        if self.behind == 0:
            return "ahead-only"
        if self.ahead == 0:
            return "behind-only"
        return "diverged"


NO_DIVERGENCE = Divergence(ahead=0, behind=0)


def compute_divergence(git: Git, cwd: Path, local_ref: str, base_ref: str) -> Divergence:
    """Count commits between ``local_ref`` and ``base_ref`` in one query.

    A failed query reports nothing to do rather than an error. Callers that
    need to know the repository is healthy run check_git_state first.
    """
    if local_ref == base_ref:
        return NO_DIVERGENCE
    counts = git.count_left_right(cwd, base_ref, local_ref)
    if counts is None:
        return NO_DIVERGENCE
    behind, ahead = counts
    return Divergence(ahead=ahead, behind=behind)
