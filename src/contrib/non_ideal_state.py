"""Non-ideal state types shared across gateways, core logic and commands.

Operations that can fail in an expected way return ``T | SomeNonIdealState``
instead of raising. Commands narrow the union with ``EnsureIdeal``, which is
the only place that turns a non-ideal state into a process exit code.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class NonIdealState(Protocol):
    """Structural type implemented by every non-ideal-state dataclass."""

    @property
    def error_type(self) -> str: ...

    @property
    def message(self) -> str: ...


@dataclass(frozen=True)
class ToolMissing:
    """A required executable (git, gh) is not installed."""

    tool: str
    hint: str

    @property
    def error_type(self) -> str:
        return "tool-missing"

    @property
    def message(self) -> str:
        return f"{self.tool} is not installed or not on PATH. {self.hint}"


@dataclass(frozen=True)
class NotInRepository:
    """The current directory is not inside a git work tree."""

    cwd: str

    @property
    def error_type(self) -> str:
        return "not-in-repository"

    @property
    def message(self) -> str:
        return "Not inside a git repository."


@dataclass(frozen=True)
class NoCurrentBranch:
    """HEAD is detached or the current branch could not be determined."""

    @property
    def error_type(self) -> str:
        return "no-current-branch"

    @property
    def message(self) -> str:
        return "Could not determine current branch (detached HEAD?)."


@dataclass(frozen=True)
class UncommittedChanges:
    """The working tree has changes that the operation would not carry along."""

    action: str

    @property
    def error_type(self) -> str:
        return "uncommitted-changes"

    @property
    def message(self) -> str:
        return f"You have uncommitted changes. Please commit or stash them before {self.action}."


@dataclass(frozen=True)
class RefResolutionFailed:
    """A configured ref does not exist (checked before any mutation)."""

    ref: str

    @property
    def error_type(self) -> str:
        return "ref-resolution-failed"

    @property
    def message(self) -> str:
        return (
            f"Remote ref {self.ref} does not exist. This can happen if the branch was "
            "renamed or deleted on the remote; the base branch in .contributerc.json "
            "may need updating."
        )


@dataclass(frozen=True)
class InvalidBranchName:
    """A user-supplied branch name is not a valid git branch name."""

    branch_name: str

    @property
    def error_type(self) -> str:
        return "invalid-branch-name"

    @property
    def message(self) -> str:
        return (
            f"Invalid branch name '{self.branch_name}'. Use only alphanumeric characters, "
            "dots, hyphens, underscores, and slashes."
        )


@dataclass(frozen=True)
class BranchAlreadyExists:
    """The target branch name is already taken."""

    branch_name: str

    @property
    def error_type(self) -> str:
        return "branch-already-exists"

    @property
    def message(self) -> str:
        return f"Branch '{self.branch_name}' already exists. Choose a different name."


@dataclass(frozen=True)
class LocalCommitsOnBranch:
    """A branch about to be moved has commits its target does not contain."""

    branch: str
    target: str
    count: int

    @property
    def error_type(self) -> str:
        return "local-commits-on-branch"

    @property
    def message(self) -> str:
        plural = "s" if self.count != 1 else ""
        return (
            f"{self.branch} has {self.count} local commit{plural} not on {self.target}; "
            f"left it where it is. Check out {self.branch} and run 'contrib sync' to move "
            "the commits to a branch of their own."
        )
