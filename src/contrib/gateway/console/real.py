"""Production console prompts backed by click."""

import click

from contrib.gateway.console.abc import Console


class RealConsole(Console):
    """Prompts on stderr so stdout stays clean. Ctrl-C raises click.Abort."""

    def confirm(self, message: str, *, default: bool) -> bool:
        return click.confirm(message, default=default, err=True)

    def select(self, message: str, choices: list[str]) -> str:
        return click.prompt(
            message,
            type=click.Choice(choices, case_sensitive=False),
            default=choices[-1],
            show_choices=True,
            err=True,
        )

    def prompt_text(self, message: str, *, default: str | None) -> str:
        return click.prompt(message, default=default, err=True)
