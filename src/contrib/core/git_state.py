"""Precondition check run before any operation that issues several mutations."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from contrib.gateway.git.abc import Git
from contrib.gateway.git.types import GitState

_ABORT_COMMANDS = {
    "rebase": "git rebase --abort",
    "merge": "git merge --abort",
    "cherry-pick": "git cherry-pick --abort",
    "bisect": "git bisect reset",
}


@dataclass(frozen=True)
class ShallowCloneWarning:
    """Non-fatal: merge-base and ahead/behind answers may be incomplete."""

    @property
    def message(self) -> str:
        return (
            "This is a shallow clone. Divergence and rebase decisions may be "
            "inaccurate; run `git fetch --unshallow` for full history."
        )


@dataclass(frozen=True)
class GitStateClear:
    """The repository can be mutated. May carry a shallow-clone warning."""

    shallow_warning: ShallowCloneWarning | None


@dataclass(frozen=True)
class GitStateError:
    """Another git process holds the index, or an operation is half done."""

    kind: Literal["lock-file", "in-progress-op"]
    action: str
    detail: str
    hint: str

    @property
    def error_type(self) -> str:
        return "git-state-error"

    @property
    def message(self) -> str:
        return f"Cannot {self.action}: {self.detail}\n  {self.hint}"


def inspect_git_state(git: Git, cwd: Path) -> GitState:
    """Snapshot lock file, in-progress operation and shallow status.

    Never cached: call again after any mutation.
    """
    return git.get_git_state(cwd)


def check_git_state(git: Git, cwd: Path, action: str) -> GitStateClear | GitStateError:
    """Refuse to proceed while another git process or operation owns the repo.

    A lock file is reported before an in-progress operation since it usually
    means a git process is still running.
    """
    state = inspect_git_state(git, cwd)
    git_dir = state.git_dir if state.git_dir is not None else Path(".git")

    if state.lock_file:
        lock_path = git_dir / "index.lock"
        return GitStateError(
            kind="lock-file",
            action=action,
            detail=f"a git lock file exists at {lock_path}",
            hint=(
                "Another git process may be running. If not, remove the stale lock: "
                f"rm {lock_path}"
            ),
        )

    if state.in_progress_op is not None:
        op = state.in_progress_op
        return GitStateError(
            kind="in-progress-op",
            action=action,
            detail=f"a {op} is in progress",
            hint=f"Finish it, or abort with: {_ABORT_COMMANDS[op]}",
        )

    return GitStateClear(shallow_warning=ShallowCloneWarning() if state.shallow else None)
