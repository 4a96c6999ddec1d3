"""CLI error handling for non-ideal-state type narrowing.

Core code returns non-ideal states as values. This module is the single place
where they become user-facing errors and a process exit code.
"""

from __future__ import annotations

from typing import TypeVar

import click

from contrib.core.git_state import GitStateClear, GitStateError
from contrib.non_ideal_state import NoCurrentBranch, NonIdealState
from contrib.output import user_output, warning_prefix

T = TypeVar("T")


class EnsureIdeal:
    """Helper class for narrowing non-ideal-state discriminated unions."""

    @staticmethod
    def ideal_state(result: T | NonIdealState) -> T:
        """Ensure result is not a NonIdealState, otherwise exit with error.

        This method provides type narrowing: it takes `T | NonIdealState` and
        returns `T`, allowing the type checker to understand the value cannot
        be a NonIdealState after this call.

        Raises:
            SystemExit: If result is NonIdealState (with exit code 1)
        """
        if isinstance(result, NonIdealState):
            user_output(click.style("Error: ", fg="red") + result.message)
            raise SystemExit(1)
        return result

    @staticmethod
    def branch(result: str | None) -> str:
        """Ensure a branch is checked out (not detached HEAD)."""
        if result is None:
            return EnsureIdeal.ideal_state(NoCurrentBranch())
        return result

    @staticmethod
    def git_state(result: GitStateClear | GitStateError) -> GitStateClear:
        """Ensure no lock file or in-progress operation blocks mutation.

        A shallow clone is reported as a warning and does not stop the command.
        """
        if isinstance(result, GitStateError):
            user_output(click.style("Error: ", fg="red") + result.message)
            raise SystemExit(1)
        if result.shallow_warning is not None:
            user_output(warning_prefix() + result.shallow_warning.message)
        return result
