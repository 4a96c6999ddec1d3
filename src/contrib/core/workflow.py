"""Resolve a workflow configuration into concrete branches and remotes.

Every function here is pure and total over a validated WorkflowConfig.
"""

from dataclasses import dataclass
from typing import Literal

from contrib.core.config import DEFAULT_DEV_BRANCH, WorkflowConfig, WorkflowMode, has_dev_branch

WORKFLOW_DESCRIPTIONS: dict[WorkflowMode, str] = {
    "clean-flow": "Clean Flow: main + dev, squash features into dev, merge dev into main",
    "github-flow": "GitHub Flow: main + feature branches, squash/merge into main",
    "git-flow": "Git Flow: main + develop + release + hotfix branches",
}

GIT_FLOW_PROTECTED_PREFIXES = frozenset({"release/", "hotfix/"})


@dataclass(frozen=True)
class SyncTarget:
    """Where the base branch is synced from.

    Attributes:
        remote: Remote to fetch, e.g. "upstream"
        ref: Remote-tracking ref of the base branch, e.g. "upstream/dev"
        strategy: How the local base branch catches up
    """

    remote: str
    ref: str
    strategy: Literal["pull", "reset"]


@dataclass(frozen=True)
class ProtectedBranchSet:
    """Branches that must never be deleted or reset by cleanup."""

    exact: frozenset[str]
    prefixes: frozenset[str]

    def is_protected(self, branch: str) -> bool:
        if branch in self.exact:
            return True
        return any(branch.startswith(prefix) for prefix in self.prefixes)


def resolve_base_branch(config: WorkflowConfig) -> str:
    """Branch that feature branches start from and pull requests target."""
    if has_dev_branch(config.workflow):
        return config.dev_branch or DEFAULT_DEV_BRANCH
    return config.main_branch


def resolve_sync_remote(config: WorkflowConfig) -> str:
    if config.role == "contributor":
        return config.upstream
    return config.origin


def resolve_sync_target(config: WorkflowConfig) -> SyncTarget:
    """Contributors sync from their upstream remote, maintainers from origin.

    The strategy is always "pull": the local base branch is fast-forwarded,
    never rewritten.
    """
    remote = resolve_sync_remote(config)
    return SyncTarget(
        remote=remote,
        ref=f"{remote}/{resolve_base_branch(config)}",
        strategy="pull",
    )


def resolve_protected_branches(config: WorkflowConfig) -> ProtectedBranchSet:
    """Main, the dev branch of dev-branch workflows, and git-flow release/hotfix branches."""
    exact = {config.main_branch}
    if has_dev_branch(config.workflow):
        exact.add(config.dev_branch or DEFAULT_DEV_BRANCH)
    prefixes = GIT_FLOW_PROTECTED_PREFIXES if config.workflow == "git-flow" else frozenset()
    return ProtectedBranchSet(exact=frozenset(exact), prefixes=prefixes)
