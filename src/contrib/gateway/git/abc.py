"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
decision logic in ``contrib.core`` testable without a repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation on top of a CommandRunner
- FakeGit: In-memory implementation for tests

Query operations never raise and never mutate. When git fails they return the
"nothing to report" value documented on each method. Mutation operations return
a GitMutationResult (or RebaseResult) and leave reporting to the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contrib.gateway.git.types import (
        GitMutationResult,
        GitState,
        LocalBranchInfo,
        RebaseResult,
    )


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    # ============================================================================
    # Environment
    # ============================================================================

    @abstractmethod
    def is_available(self, cwd: Path) -> bool:
        """Check that the git executable can be run at all."""
        ...

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the work tree containing ``cwd``.

        Returns:
            Absolute path of the work tree root, or None outside a repository
        """
        ...

    @abstractmethod
    def get_git_state(self, cwd: Path) -> GitState:
        """Aggregate lock file, in-progress operation and shallow-clone status.

        Resolves the git directory once and checks every marker against it, so
        a single call replaces several separate probes.
        """
        ...

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch.

        Returns:
            Branch name, or None if in detached HEAD state or on failure
        """
        ...

    @abstractmethod
    def get_upstream_ref(self, cwd: Path) -> str | None:
        """Get the upstream tracking ref of the current branch.

        Returns:
            Short ref such as "origin/feature/a", or None if no upstream is set
        """
        ...

    @abstractmethod
    def get_commit_hash(self, cwd: Path, ref: str) -> str | None:
        """Resolve ``ref`` to a full commit hash.

        Returns:
            Commit SHA, or None if the ref does not resolve
        """
        ...

    @abstractmethod
    def get_merge_base(self, cwd: Path, ref1: str, ref2: str) -> str | None:
        """Get the most recent common ancestor of two refs.

        Returns:
            Commit SHA of the fork point, or None if there is none
        """
        ...

    @abstractmethod
    def count_left_right(self, cwd: Path, left: str, right: str) -> tuple[int, int] | None:
        """Count commits on each side of ``left...right``.

        Runs ``git rev-list --left-right --count left...right``.

        Returns:
            (commits only in left, commits only in right), or None on failure
        """
        ...

    @abstractmethod
    def count_commits_ahead(self, cwd: Path, branch: str, upstream: str) -> int | None:
        """Count commits reachable from ``branch`` but not from ``upstream``.

        Returns:
            Commit count (0 if the refs are equal), or None if either ref is
            missing or git fails. None means "unknown", never "no commits".
        """
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check for staged, unstaged or untracked changes.

        Returns True when git status fails (corrupt index, lock file), so that
        callers never treat an unreadable working tree as safe to discard.
        """
        ...

    @abstractmethod
    def get_changed_files(self, cwd: Path) -> list[str]:
        """List paths with any change in ``git status --porcelain``.

        Renames report the new path.
        """
        ...

    @abstractmethod
    def list_merged_branches(self, cwd: Path, base: str) -> list[str]:
        """List local branches whose tips are reachable from ``base``."""
        ...

    @abstractmethod
    def list_local_branches(self, cwd: Path) -> list[LocalBranchInfo]:
        """List local branches with upstream and ``gone`` tracking status."""
        ...

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def fetch_remote(self, cwd: Path, remote: str) -> GitMutationResult:
        """Fetch all refs from ``remote``."""
        ...

    @abstractmethod
    def prune_remote(self, cwd: Path, remote: str) -> GitMutationResult:
        """Delete remote-tracking refs whose remote branches no longer exist."""
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str) -> GitMutationResult:
        """Check out an existing local branch."""
        ...

    @abstractmethod
    def create_branch(self, cwd: Path, branch: str, start_point: str) -> GitMutationResult:
        """Create ``branch`` at ``start_point`` and check it out."""
        ...

    @abstractmethod
    def rename_branch(self, cwd: Path, old_name: str, new_name: str) -> GitMutationResult:
        """Rename a local branch, keeping its commits and the working tree."""
        ...

    @abstractmethod
    def unset_upstream(self, cwd: Path) -> GitMutationResult:
        """Remove the upstream tracking configuration of the current branch."""
        ...

    @abstractmethod
    def force_branch(self, cwd: Path, branch: str, target: str) -> GitMutationResult:
        """Point ``branch`` at ``target`` with ``git branch -f``, creating it if needed.

        Must not be used on the checked-out branch.
        """
        ...

    @abstractmethod
    def reset_hard(self, cwd: Path, ref: str) -> GitMutationResult:
        """Reset the current branch, index and working tree to ``ref``."""
        ...

    @abstractmethod
    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> GitMutationResult:
        """Delete a local branch.

        Args:
            force: Use -D instead of -d. Required for squash-merged branches,
                which git's merge check does not recognise as merged.
        """
        ...

    @abstractmethod
    def stage_files(self, cwd: Path, paths: list[str]) -> GitMutationResult:
        """Stage ``paths``, including deletions and untracked files."""
        ...

    @abstractmethod
    def commit(self, cwd: Path, message: str, paths: list[str]) -> GitMutationResult:
        """Commit only ``paths`` with ``message``.

        Anything else already staged stays staged and out of the commit.
        """
        ...

    @abstractmethod
    def rebase(self, cwd: Path, upstream: str) -> RebaseResult:
        """Replay the current branch's unique commits onto ``upstream``."""
        ...

    @abstractmethod
    def rebase_onto(self, cwd: Path, new_base: str, old_base: str) -> RebaseResult:
        """Replay only the commits after ``old_base`` onto ``new_base``."""
        ...

    @abstractmethod
    def pull(self, cwd: Path, remote: str, branch: str, *, ff_only: bool) -> GitMutationResult:
        """Pull ``branch`` from ``remote`` into the current branch.

        Args:
            ff_only: Refuse anything but a fast-forward (no merge commits)
        """
        ...
