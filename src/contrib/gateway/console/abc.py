"""Interactive prompt layer.

Core logic never talks to the terminal directly: decisions are requested
through this interface so they can be answered by a fake in tests.
"""

from abc import ABC, abstractmethod


class Console(ABC):
    """Abstract interface for user prompts."""

    @abstractmethod
    def confirm(self, message: str, *, default: bool) -> bool:
        """Ask a yes/no question."""
        ...

    @abstractmethod
    def select(self, message: str, choices: list[str]) -> str:
        """Ask the user to pick one of ``choices``.

        Returns:
            One element of ``choices``
        """
        ...

    @abstractmethod
    def prompt_text(self, message: str, *, default: str | None) -> str:
        """Ask for free-text input."""
        ...
