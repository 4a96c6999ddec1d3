"""Value and result types for the Git gateway.

Mutations return ``GitCommandSucceeded | GitCommandFailed`` so callers handle
failure exhaustively instead of matching on stderr. Rebases return
``RebaseResult`` because a conflict leaves the repository mid-operation and the
caller needs the conflicted files to report it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

InProgressOperation = Literal["rebase", "merge", "cherry-pick", "bisect"]


@dataclass(frozen=True)
class GitCommandSucceeded:
    """Success result from a repository mutation."""


@dataclass(frozen=True)
class GitCommandFailed:
    """Error result from a repository mutation. Implements NonIdealState."""

    operation: str
    stderr: str
    returncode: int

    @property
    def error_type(self) -> str:
        return "git-command-failed"

    @property
    def message(self) -> str:
        detail = self.stderr.strip()
        if detail:
            return f"Failed to {self.operation}: {detail}"
        return f"Failed to {self.operation} (exit code {self.returncode})"


GitMutationResult = GitCommandSucceeded | GitCommandFailed


@dataclass(frozen=True)
class RebaseResult:
    """Result of a git rebase operation.

    Attributes:
        success: True if rebase completed without conflicts
        conflict_files: Paths with unresolved conflicts (empty if success=True)
        stderr: Output of the failed rebase, empty on success
    """

    success: bool
    conflict_files: tuple[str, ...]
    stderr: str = ""


@dataclass(frozen=True)
class LocalBranchInfo:
    """One line of ``git branch -vv``."""

    name: str
    is_current: bool
    upstream: str | None
    gone: bool


@dataclass(frozen=True)
class GitState:
    """Snapshot of repository conditions that make mutation unsafe.

    Recomputed at the start of every operation that could race another git
    process; never cached.
    """

    lock_file: bool
    in_progress_op: InProgressOperation | None
    shallow: bool
    git_dir: Path | None
