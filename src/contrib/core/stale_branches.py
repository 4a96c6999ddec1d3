"""Detection of branches that were merged, including squash merges.

Squash and rebase merges leave no merge commit, so ``git branch --merged``
misses them. Two more signals cover that case:

- the branch's tracking ref is ``gone`` after a prune (remote branch deleted)
- GitHub reports a merged pull request for the branch

Either of those needs ``git branch -D``, since ``-d`` refuses a branch git
does not consider merged. A ``gone`` ref alone is a heuristic: a remote
branch deleted without merging is treated the same way.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from contrib.core.workflow import ProtectedBranchSet
from contrib.gateway.git.abc import Git
from contrib.gateway.github.abc import GitHub
from contrib.gateway.github.types import MergedPullRequest

logger = logging.getLogger(__name__)

StaleReason = Literal["merged", "gone", "pr-merged"]


@dataclass(frozen=True)
class CleanupCandidate:
    """A local branch that looks finished.

    Attributes:
        name: Local branch name
        reasons: Every signal that flagged the branch, strongest first
        merged_pr: The merged pull request, when GitHub reported one
    """

    name: str
    reasons: tuple[StaleReason, ...]
    merged_pr: MergedPullRequest | None

    @property
    def force_delete(self) -> bool:
        return "gone" in self.reasons or "pr-merged" in self.reasons


@dataclass(frozen=True)
class StaleBranch:
    """Why the current branch is considered finished."""

    branch: str
    gone: bool
    merged_pr: MergedPullRequest | None


def find_cleanup_candidates(
    git: Git,
    github: GitHub,
    cwd: Path,
    *,
    base_branch: str,
    protected: ProtectedBranchSet,
    current_branch: str | None,
    check_prs: bool,
) -> list[CleanupCandidate]:
    """Combine all three merge signals over every local branch.

    Protected branches and the checked-out branch are never candidates. PR
    lookups are skipped when ``check_prs`` is False or gh is unavailable.
    """
    merged = set(git.list_merged_branches(cwd, base_branch))
    local_branches = git.list_local_branches(cwd)

    use_prs = check_prs and github.is_available(cwd)
    if check_prs and not use_prs:
        logger.debug("gh unavailable, skipping merged PR lookups")

    candidates: list[CleanupCandidate] = []
    for info in local_branches:
        name = info.name
        if name == current_branch or name == base_branch or protected.is_protected(name):
            continue

        reasons: list[StaleReason] = []
        if name in merged:
            reasons.append("merged")
        if info.gone:
            reasons.append("gone")

        merged_pr: MergedPullRequest | None = None
        if use_prs and name not in merged:
            merged_pr = github.get_merged_pr_for_branch(cwd, name)
            if merged_pr is not None:
                reasons.append("pr-merged")

        if reasons:
            candidates.append(
                CleanupCandidate(name=name, reasons=tuple(reasons), merged_pr=merged_pr)
            )
    return candidates


def detect_stale_branch(git: Git, github: GitHub, cwd: Path, branch: str) -> StaleBranch | None:
    """Apply the gone and merged-PR signals to a single branch."""
    gone = any(info.name == branch and info.gone for info in git.list_local_branches(cwd))
    merged_pr = github.get_merged_pr_for_branch(cwd, branch) if github.is_available(cwd) else None
    if not gone and merged_pr is None:
        return None
    return StaleBranch(branch=branch, gone=gone, merged_pr=merged_pr)
