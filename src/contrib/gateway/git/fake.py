"""Fake Git implementation for testing.

FakeGit is an in-memory implementation that accepts pre-configured state in its
constructor. Construct instances directly with keyword arguments.
"""

from __future__ import annotations

from pathlib import Path

from contrib.gateway.git.abc import Git
from contrib.gateway.git.types import (
    GitCommandFailed,
    GitCommandSucceeded,
    GitMutationResult,
    GitState,
    LocalBranchInfo,
    RebaseResult,
)

CLEAN_GIT_STATE = GitState(lock_file=False, in_progress_op=None, shallow=False, git_dir=None)


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    -----------------
    This fake maintains mutable state to simulate git's stateful behavior.
    checkout_branch, rename_branch, unset_upstream and delete_branch update the
    state seen by later queries within the same test.

    Failure Injection:
    -----------------
    ``failing_operations`` maps a mutation method name (e.g. "fetch_remote") to
    the stderr it fails with. Rebases use ``rebase_result``.

    Mutation Tracking:
    -----------------
    - mutations: names of mutation methods called, in order
    - fetched_remotes / pruned_remotes
    - checked_out_branches
    - created_branches: (branch, start_point)
    - renamed_branches: (old_name, new_name)
    - forced_branches: (branch, target)
    - hard_resets: refs passed to reset_hard()
    - deleted_branches: (branch, force)
    - rebases: ("rebase", upstream) or ("rebase --onto", new_base, old_base)
    - pulls: (remote, branch, ff_only)
    - staged_files: paths passed to stage_files(), in order
    - commits: (message, paths)
    - merge_base_queries / left_right_queries: query arguments, in order
    """

    def __init__(
        self,
        *,
        available: bool = True,
        repository_root: Path | None = None,
        git_state: GitState | None = None,
        current_branch: str | None = None,
        upstream_ref: str | None = None,
        commit_hashes: dict[str, str] | None = None,
        merge_bases: dict[tuple[str, str], str] | None = None,
        left_right_counts: dict[tuple[str, str], tuple[int, int]] | None = None,
        ahead_counts: dict[tuple[str, str], int] | None = None,
        uncommitted: bool = False,
        changed_files: list[str] | None = None,
        merged_branches: dict[str, list[str]] | None = None,
        local_branches: list[LocalBranchInfo] | None = None,
        rebase_result: RebaseResult | None = None,
        failing_operations: dict[str, str] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            available: Whether ``git --version`` would succeed
            repository_root: Work tree root; None simulates running outside a repo
            git_state: Snapshot returned by get_git_state (clean by default)
            current_branch: Checked-out branch, None for detached HEAD
            upstream_ref: Upstream of the current branch, e.g. "origin/feature/a"
            commit_hashes: Mapping of ref -> SHA for refs that resolve
            merge_bases: Mapping of (ref1, ref2) -> SHA, looked up in either order
            left_right_counts: Mapping of (left, right) -> (left_only, right_only)
            ahead_counts: Mapping of (branch, upstream) -> commits ahead; pairs not
                listed count as unknown (None)
            uncommitted: Whether the working tree has changes
            changed_files: Paths reported by get_changed_files
            merged_branches: Mapping of base -> branches merged into it
            local_branches: Result of list_local_branches
            rebase_result: Result of every rebase call (success by default)
            failing_operations: Mapping of mutation method name -> stderr
        """
        self._available = available
        self._repository_root = repository_root
        self._git_state = git_state if git_state is not None else CLEAN_GIT_STATE
        self._current_branch = current_branch
        self._upstream_ref = upstream_ref
        self._commit_hashes = commit_hashes if commit_hashes is not None else {}
        self._merge_bases = merge_bases if merge_bases is not None else {}
        self._left_right_counts = left_right_counts if left_right_counts is not None else {}
        self._ahead_counts = ahead_counts if ahead_counts is not None else {}
        self._uncommitted = uncommitted
        self._changed_files = changed_files if changed_files is not None else []
        self._merged_branches = merged_branches if merged_branches is not None else {}
        self._local_branches = local_branches if local_branches is not None else []
        self._rebase_result = (
            rebase_result
            if rebase_result is not None
            else RebaseResult(success=True, conflict_files=())
        )
        self._failing_operations = failing_operations if failing_operations is not None else {}

        # Mutation tracking
        self._mutations: list[str] = []
        self._fetched_remotes: list[str] = []
        self._pruned_remotes: list[str] = []
        self._checked_out_branches: list[str] = []
        self._created_branches: list[tuple[str, str]] = []
        self._renamed_branches: list[tuple[str, str]] = []
        self._forced_branches: list[tuple[str, str]] = []
        self._hard_resets: list[str] = []
        self._deleted_branches: list[tuple[str, bool]] = []
        self._rebases: list[tuple[str, ...]] = []
        self._pulls: list[tuple[str, str, bool]] = []
        self._staged_files: list[str] = []
        self._commits: list[tuple[str, tuple[str, ...]]] = []
        self._merge_base_queries: list[tuple[str, str]] = []
        self._left_right_queries: list[tuple[str, str]] = []

    # ============================================================================
    # Environment
    # ============================================================================

    def is_available(self, cwd: Path) -> bool:
        return self._available

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._repository_root

    def get_git_state(self, cwd: Path) -> GitState:
        return self._git_state

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branch

    def get_upstream_ref(self, cwd: Path) -> str | None:
        return self._upstream_ref

    def get_commit_hash(self, cwd: Path, ref: str) -> str | None:
        return self._commit_hashes.get(ref)

    def get_merge_base(self, cwd: Path, ref1: str, ref2: str) -> str | None:
        self._merge_base_queries.append((ref1, ref2))
        if (ref1, ref2) in self._merge_bases:
            return self._merge_bases[(ref1, ref2)]
        return self._merge_bases.get((ref2, ref1))

    def count_left_right(self, cwd: Path, left: str, right: str) -> tuple[int, int] | None:
        self._left_right_queries.append((left, right))
        return self._left_right_counts.get((left, right))

    def count_commits_ahead(self, cwd: Path, branch: str, upstream: str) -> int | None:
        return self._ahead_counts.get((branch, upstream))

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return self._uncommitted

    def get_changed_files(self, cwd: Path) -> list[str]:
        return list(self._changed_files)

    def list_merged_branches(self, cwd: Path, base: str) -> list[str]:
        return list(self._merged_branches.get(base, []))

    def list_local_branches(self, cwd: Path) -> list[LocalBranchInfo]:
        return list(self._local_branches)

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def _mutate(self, method: str, operation: str) -> GitMutationResult:
        self._mutations.append(method)
        if method in self._failing_operations:
            return GitCommandFailed(
                operation=operation, stderr=self._failing_operations[method], returncode=1
            )
        return GitCommandSucceeded()

    def fetch_remote(self, cwd: Path, remote: str) -> GitMutationResult:
        self._fetched_remotes.append(remote)
        return self._mutate("fetch_remote", f"fetch {remote}")

    def prune_remote(self, cwd: Path, remote: str) -> GitMutationResult:
        self._pruned_remotes.append(remote)
        return self._mutate("prune_remote", f"prune {remote} remote refs")

    def checkout_branch(self, cwd: Path, branch: str) -> GitMutationResult:
        self._checked_out_branches.append(branch)
        result = self._mutate("checkout_branch", f"checkout {branch}")
        if isinstance(result, GitCommandSucceeded):
            self._current_branch = branch
        return result

    def create_branch(self, cwd: Path, branch: str, start_point: str) -> GitMutationResult:
        self._created_branches.append((branch, start_point))
        result = self._mutate("create_branch", f"create branch {branch} from {start_point}")
        if isinstance(result, GitCommandSucceeded):
            self._current_branch = branch
        return result

    def rename_branch(self, cwd: Path, old_name: str, new_name: str) -> GitMutationResult:
        self._renamed_branches.append((old_name, new_name))
        result = self._mutate("rename_branch", f"rename branch {old_name} to {new_name}")
        if isinstance(result, GitCommandSucceeded) and self._current_branch == old_name:
            self._current_branch = new_name
        return result

    def unset_upstream(self, cwd: Path) -> GitMutationResult:
        result = self._mutate("unset_upstream", "unset upstream tracking")
        if isinstance(result, GitCommandSucceeded):
            self._upstream_ref = None
        return result

    def force_branch(self, cwd: Path, branch: str, target: str) -> GitMutationResult:
        self._forced_branches.append((branch, target))
        return self._mutate("force_branch", f"move {branch} to {target}")

    def reset_hard(self, cwd: Path, ref: str) -> GitMutationResult:
        self._hard_resets.append(ref)
        return self._mutate("reset_hard", f"reset to {ref}")

    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> GitMutationResult:
        self._deleted_branches.append((branch, force))
        result = self._mutate("delete_branch", f"delete branch {branch}")
        if isinstance(result, GitCommandSucceeded):
            self._local_branches = [b for b in self._local_branches if b.name != branch]
        return result

    def stage_files(self, cwd: Path, paths: list[str]) -> GitMutationResult:
        self._staged_files.extend(paths)
        return self._mutate("stage_files", "stage files")

    def commit(self, cwd: Path, message: str, paths: list[str]) -> GitMutationResult:
        result = self._mutate("commit", f"commit {message}")
        if isinstance(result, GitCommandSucceeded):
            self._commits.append((message, tuple(paths)))
            self._changed_files = [p for p in self._changed_files if p not in paths]
        return result

    def rebase(self, cwd: Path, upstream: str) -> RebaseResult:
        self._mutations.append("rebase")
        self._rebases.append(("rebase", upstream))
        return self._rebase_result

    def rebase_onto(self, cwd: Path, new_base: str, old_base: str) -> RebaseResult:
        self._mutations.append("rebase_onto")
        self._rebases.append(("rebase --onto", new_base, old_base))
        return self._rebase_result

    def pull(self, cwd: Path, remote: str, branch: str, *, ff_only: bool) -> GitMutationResult:
        self._pulls.append((remote, branch, ff_only))
        return self._mutate("pull", f"pull {remote}/{branch}")

    # ============================================================================
    # Test assertion helpers
    # ============================================================================

    @property
    def current_branch(self) -> str | None:
        """Current branch after any checkouts or renames."""
        return self._current_branch

    @property
    def upstream_ref(self) -> str | None:
        return self._upstream_ref

    @property
    def mutations(self) -> list[str]:
        """Names of mutation methods called, in order.

        This property is for test assertions only.
        """
        return self._mutations.copy()

    @property
    def fetched_remotes(self) -> list[str]:
        return self._fetched_remotes.copy()

    @property
    def pruned_remotes(self) -> list[str]:
        return self._pruned_remotes.copy()

    @property
    def checked_out_branches(self) -> list[str]:
        return self._checked_out_branches.copy()

    @property
    def created_branches(self) -> list[tuple[str, str]]:
        return self._created_branches.copy()

    @property
    def renamed_branches(self) -> list[tuple[str, str]]:
        return self._renamed_branches.copy()

    @property
    def forced_branches(self) -> list[tuple[str, str]]:
        return self._forced_branches.copy()

    @property
    def hard_resets(self) -> list[str]:
        return self._hard_resets.copy()

    @property
    def deleted_branches(self) -> list[tuple[str, bool]]:
        """Branches deleted during the test as (branch, force) tuples.

        This property is for test assertions only.
        """
        return self._deleted_branches.copy()

    @property
    def rebases(self) -> list[tuple[str, ...]]:
        return self._rebases.copy()

    @property
    def pulls(self) -> list[tuple[str, str, bool]]:
        return self._pulls.copy()

    @property
    def staged_files(self) -> list[str]:
        return self._staged_files.copy()

    @property
    def commits(self) -> list[tuple[str, tuple[str, ...]]]:
        """Commits made during the test as (message, paths) tuples.

        This property is for test assertions only.
        """
        return self._commits.copy()

    @property
    def merge_base_queries(self) -> list[tuple[str, str]]:
        return self._merge_base_queries.copy()

    @property
    def left_right_queries(self) -> list[tuple[str, str]]:
        return self._left_right_queries.copy()
