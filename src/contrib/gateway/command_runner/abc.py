"""Abstract interface for running external commands.

Every git and gh invocation goes through this gateway. It never raises for a
non-zero exit: the caller inspects ``CommandResult.returncode``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

# Conventional shell exit status for "command not found".
TOOL_MISSING_EXIT_CODE = 127


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external process invocation."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def tool_missing(self) -> bool:
        return self.returncode == TOOL_MISSING_EXIT_CODE


class CommandRunner(ABC):
    """Abstract interface for running an external command to completion."""

    @abstractmethod
    def run(self, cmd: list[str], *, cwd: Path) -> CommandResult:
        """Run ``cmd`` in ``cwd`` and capture its output.

        Args:
            cmd: Full argv, including the executable (e.g. ["git", "status"])
            cwd: Working directory for the process

        Returns:
            CommandResult. A missing executable is reported as returncode 127,
            never as an exception.
        """
        ...
