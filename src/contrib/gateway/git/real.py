"""Production implementation of Git operations on top of a CommandRunner."""

import logging
import re
from pathlib import Path

from contrib.gateway.command_runner.abc import CommandResult, CommandRunner
from contrib.gateway.git.abc import Git
from contrib.gateway.git.types import (
    GitCommandFailed,
    GitCommandSucceeded,
    GitMutationResult,
    GitState,
    InProgressOperation,
    LocalBranchInfo,
    RebaseResult,
)

logger = logging.getLogger(__name__)

# Marker paths inside the git directory, checked in priority order.
IN_PROGRESS_MARKERS: tuple[tuple[InProgressOperation, tuple[str, ...]], ...] = (
    ("rebase", ("rebase-merge", "rebase-apply")),
    ("merge", ("MERGE_HEAD",)),
    ("cherry-pick", ("CHERRY_PICK_HEAD",)),
    ("bisect", ("BISECT_LOG",)),
)

# "<name> <sha> [<upstream>[: <status>]] <subject>" after the two-column marker.
_BRANCH_VV_PATTERN = re.compile(r"^(\S+)\s+[0-9a-f]+\s+(?:\[([^\]]+)\])?")
_PORCELAIN_PATTERN = re.compile(r"^..\s+(.*)$")


def _to_mutation_result(result: CommandResult, operation: str) -> GitMutationResult:
    if result.ok:
        return GitCommandSucceeded()
    return GitCommandFailed(
        operation=operation, stderr=result.stderr, returncode=result.returncode
    )


def parse_porcelain_paths(output: str) -> list[str]:
    """Extract paths from ``git status --porcelain`` output.

    Renames are reported as "old -> new"; the new path is returned. The last
    " -> " is used so file names containing that text survive.
    """
    paths: list[str] = []
    for raw in output.rstrip().splitlines():
        line = raw.rstrip("\r")
        match = _PORCELAIN_PATTERN.match(line)
        if match is None:
            continue
        path = match.group(1)
        rename_idx = path.rfind(" -> ")
        if rename_idx != -1:
            path = path[rename_idx + 4 :]
        if path:
            paths.append(path)
    return paths


def parse_branch_vv(output: str) -> list[LocalBranchInfo]:
    """Parse ``git branch -vv --no-color`` into LocalBranchInfo records.

    Only the bracket directly after the commit hash is read as tracking info,
    so a commit subject containing "[...: gone]" is not mistaken for it.
    Detached-HEAD lines are skipped.
    """
    branches: list[LocalBranchInfo] = []
    for raw in output.rstrip().splitlines():
        if not raw.strip():
            continue
        is_current = raw.startswith("*")
        trimmed = raw[2:]
        if trimmed.startswith("("):
            continue
        match = _BRANCH_VV_PATTERN.match(trimmed)
        if match is None:
            name = trimmed.split()[0] if trimmed.split() else ""
            if name:
                branches.append(
                    LocalBranchInfo(name=name, is_current=is_current, upstream=None, gone=False)
                )
            continue
        name, bracket = match.group(1), match.group(2)
        upstream: str | None = None
        gone = False
        if bracket is not None:
            upstream_part, _, status = bracket.partition(":")
            upstream = upstream_part.strip()
            gone = status.strip() == "gone"
        branches.append(
            LocalBranchInfo(name=name, is_current=is_current, upstream=upstream, gone=gone)
        )
    return branches


class RealGit(Git):
    """Production implementation running the git executable.

    All commands go through the injected CommandRunner so that parsing can be
    exercised against canned output.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def _run(self, cwd: Path, *args: str) -> CommandResult:
        return self._runner.run(["git", *args], cwd=cwd)

    def _stdout_or_none(self, cwd: Path, *args: str) -> str | None:
        result = self._run(cwd, *args)
        if not result.ok:
            return None
        value = result.stdout.strip()
        return value or None

    # ============================================================================
    # Environment
    # ============================================================================

    def is_available(self, cwd: Path) -> bool:
        return self._run(cwd, "--version").ok

    def get_repository_root(self, cwd: Path) -> Path | None:
        root = self._stdout_or_none(cwd, "rev-parse", "--show-toplevel")
        if root is None:
            return None
        return Path(root)

    def get_git_state(self, cwd: Path) -> GitState:
        git_dir_text = self._stdout_or_none(cwd, "rev-parse", "--git-dir")
        if git_dir_text is None:
            return GitState(lock_file=False, in_progress_op=None, shallow=False, git_dir=None)

        git_dir = Path(git_dir_text)
        if not git_dir.is_absolute():
            git_dir = cwd / git_dir

        in_progress_op: InProgressOperation | None = None
        for operation, markers in IN_PROGRESS_MARKERS:
            if any((git_dir / marker).exists() for marker in markers):
                in_progress_op = operation
                break

        shallow = self._stdout_or_none(cwd, "rev-parse", "--is-shallow-repository") == "true"

        return GitState(
            lock_file=(git_dir / "index.lock").exists(),
            in_progress_op=in_progress_op,
            shallow=shallow,
            git_dir=git_dir,
        )

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_current_branch(self, cwd: Path) -> str | None:
        branch = self._stdout_or_none(cwd, "rev-parse", "--abbrev-ref", "HEAD")
        # Detached HEAD reports the literal "HEAD"
        if branch == "HEAD":
            return None
        return branch

    def get_upstream_ref(self, cwd: Path) -> str | None:
        return self._stdout_or_none(
            cwd, "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"
        )

    def get_commit_hash(self, cwd: Path, ref: str) -> str | None:
        return self._stdout_or_none(cwd, "rev-parse", "--verify", "--quiet", ref)

    def get_merge_base(self, cwd: Path, ref1: str, ref2: str) -> str | None:
        return self._stdout_or_none(cwd, "merge-base", ref1, ref2)

    def count_left_right(self, cwd: Path, left: str, right: str) -> tuple[int, int] | None:
        output = self._stdout_or_none(
            cwd, "rev-list", "--left-right", "--count", f"{left}...{right}"
        )
        if output is None:
            return None
        parts = output.split()
        if len(parts) != 2:
            logger.debug("Unexpected rev-list --left-right output: %r", output)
            return None
        try:
            return int(parts[0]), int(parts[1])
        except ValueError:
            logger.debug("Non-numeric rev-list --left-right output: %r", output)
            return None

    def count_commits_ahead(self, cwd: Path, branch: str, upstream: str) -> int | None:
        output = self._stdout_or_none(cwd, "rev-list", "--count", f"{upstream}..{branch}")
        if output is None:
            return None
        try:
            return int(output)
        except ValueError:
            logger.debug("Non-numeric rev-list --count output: %r", output)
            return None

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        result = self._run(cwd, "status", "--porcelain")
        if not result.ok:
            return True
        return bool(result.stdout.strip())

    def get_changed_files(self, cwd: Path) -> list[str]:
        result = self._run(cwd, "status", "--porcelain")
        if not result.ok:
            return []
        return parse_porcelain_paths(result.stdout)

    def list_merged_branches(self, cwd: Path, base: str) -> list[str]:
        result = self._run(cwd, "branch", "--merged", base)
        if not result.ok:
            return []
        branches: list[str] = []
        for line in result.stdout.splitlines():
            # "* " marks the current branch, "+ " a branch checked out in another worktree
            name = re.sub(r"^[*+]?\s+", "", line).strip()
            if name and not name.startswith("("):
                branches.append(name)
        return branches

    def list_local_branches(self, cwd: Path) -> list[LocalBranchInfo]:
        result = self._run(cwd, "branch", "-vv", "--no-color")
        if not result.ok:
            return []
        return parse_branch_vv(result.stdout)

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def fetch_remote(self, cwd: Path, remote: str) -> GitMutationResult:
        return _to_mutation_result(self._run(cwd, "fetch", remote), f"fetch {remote}")

    def prune_remote(self, cwd: Path, remote: str) -> GitMutationResult:
        return _to_mutation_result(
            self._run(cwd, "remote", "prune", remote), f"prune {remote} remote refs"
        )

    def checkout_branch(self, cwd: Path, branch: str) -> GitMutationResult:
        return _to_mutation_result(self._run(cwd, "checkout", branch), f"checkout {branch}")

    def create_branch(self, cwd: Path, branch: str, start_point: str) -> GitMutationResult:
        return _to_mutation_result(
            self._run(cwd, "checkout", "-b", branch, start_point),
            f"create branch {branch} from {start_point}",
        )

    def rename_branch(self, cwd: Path, old_name: str, new_name: str) -> GitMutationResult:
        return _to_mutation_result(
            self._run(cwd, "branch", "-m", old_name, new_name),
            f"rename branch {old_name} to {new_name}",
        )

    def unset_upstream(self, cwd: Path) -> GitMutationResult:
        return _to_mutation_result(
            self._run(cwd, "branch", "--unset-upstream"), "unset upstream tracking"
        )

    def force_branch(self, cwd: Path, branch: str, target: str) -> GitMutationResult:
        return _to_mutation_result(
            self._run(cwd, "branch", "-f", branch, target), f"move {branch} to {target}"
        )

    def reset_hard(self, cwd: Path, ref: str) -> GitMutationResult:
        return _to_mutation_result(self._run(cwd, "reset", "--hard", ref), f"reset to {ref}")

    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> GitMutationResult:
        flag = "-D" if force else "-d"
        return _to_mutation_result(
            self._run(cwd, "branch", flag, branch), f"delete branch {branch}"
        )

    def stage_files(self, cwd: Path, paths: list[str]) -> GitMutationResult:
        return _to_mutation_result(self._run(cwd, "add", "--", *paths), "stage files")

    def commit(self, cwd: Path, message: str, paths: list[str]) -> GitMutationResult:
        return _to_mutation_result(
            self._run(cwd, "commit", "-m", message, "--", *paths), f"commit {message}"
        )

    def rebase(self, cwd: Path, upstream: str) -> RebaseResult:
        return self._rebase_result(cwd, self._run(cwd, "rebase", upstream))

    def rebase_onto(self, cwd: Path, new_base: str, old_base: str) -> RebaseResult:
        return self._rebase_result(cwd, self._run(cwd, "rebase", "--onto", new_base, old_base))

    def pull(self, cwd: Path, remote: str, branch: str, *, ff_only: bool) -> GitMutationResult:
        cmd = ["pull", "--ff-only", remote, branch] if ff_only else ["pull", remote, branch]
        return _to_mutation_result(self._run(cwd, *cmd), f"pull {remote}/{branch}")

    def _rebase_result(self, cwd: Path, result: CommandResult) -> RebaseResult:
        if result.ok:
            return RebaseResult(success=True, conflict_files=())
        conflicts = self._run(cwd, "diff", "--name-only", "--diff-filter=U")
        conflict_files = tuple(conflicts.stdout.split()) if conflicts.ok else ()
        return RebaseResult(
            success=False,
            conflict_files=conflict_files,
            stderr=result.stderr or result.stdout,
        )
