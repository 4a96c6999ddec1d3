"""User-facing output helpers.

All human-readable output goes to stderr so that stdout stays free for
machine-readable results.
"""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a message for the user to stderr."""
    click.echo(message, err=True, nl=nl)


def success_prefix() -> str:
    return click.style("✓", fg="green")


def warning_prefix() -> str:
    return click.style("Warning: ", fg="yellow")


def error_prefix() -> str:
    return click.style("Error: ", fg="red")
