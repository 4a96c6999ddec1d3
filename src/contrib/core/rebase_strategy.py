"""Choose between a plain rebase and a transplant (``--onto``) rebase.

A branch stacked on another feature branch still contains that branch's
commits. Once the parent is squash-merged, a plain rebase onto the sync ref
would replay those commits a second time (duplicate commits, conflicts, or
reintroduced code). Rebasing ``--onto <sync ref> <fork point>`` replays only
the commits unique to the stacked branch.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from contrib.gateway.git.abc import Git
from contrib.gateway.git.types import RebaseResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlainRebase:
    """Replay every commit unique to the branch onto the sync ref."""

    def describe(self, sync_ref: str) -> str:
        return f"git rebase {sync_ref}"


@dataclass(frozen=True)
class OntoRebase:
    """Replay only the commits after ``old_base`` onto the sync ref."""

    old_base: str

    def describe(self, sync_ref: str) -> str:
        return f"git rebase --onto {sync_ref} {self.old_base[:7]}"


RebaseStrategy = PlainRebase | OntoRebase


def branch_name_from_ref(ref: str) -> str:
    """Strip the leading ``remote/`` segment: "origin/feature/a" -> "feature/a"."""
    _, sep, rest = ref.partition("/")
    return rest if sep else ref


def determine_rebase_strategy(
    git: Git, cwd: Path, current_branch: str, sync_ref: str
) -> RebaseStrategy:
    """Decide how ``current_branch`` is rebased onto ``sync_ref``.

    Any missing information yields PlainRebase: a conflicting plain rebase is
    recoverable, silently skipped commits are not.
    """
    upstream = git.get_upstream_ref(cwd)
    if upstream is None:
        return PlainRebase()

    # Deleted remote branch: the tracking config outlived its ref
    if git.get_commit_hash(cwd, upstream) is None:
        logger.debug("Upstream %s no longer resolves", upstream)
        return PlainRebase()

    # Tracks its own remote copy, so it was forked from the base directly
    if branch_name_from_ref(upstream) == current_branch:
        return PlainRebase()

    fork_from_upstream = git.get_merge_base(cwd, "HEAD", upstream)
    fork_from_sync = git.get_merge_base(cwd, "HEAD", sync_ref)
    logger.debug(
        "Fork points for %s: upstream %s=%s, sync %s=%s",
        current_branch,
        upstream,
        fork_from_upstream,
        sync_ref,
        fork_from_sync,
    )

    if fork_from_upstream is not None and fork_from_upstream == fork_from_sync:
        return PlainRebase()
    if fork_from_upstream is not None:
        return OntoRebase(old_base=fork_from_upstream)
    return PlainRebase()


def apply_rebase_strategy(
    git: Git, cwd: Path, strategy: RebaseStrategy, sync_ref: str
) -> RebaseResult:
    if isinstance(strategy, OntoRebase):
        return git.rebase_onto(cwd, sync_ref, strategy.old_base)
    return git.rebase(cwd, sync_ref)
