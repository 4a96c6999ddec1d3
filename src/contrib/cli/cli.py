"""The `contrib` command group and console-script entry point."""

import logging

import click

from contrib.cli.commands.clean_cmd import clean_cmd
from contrib.cli.commands.commit_cmd import commit_cmd
from contrib.cli.commands.start_cmd import start_cmd
from contrib.cli.commands.status_cmd import status_cmd
from contrib.cli.commands.sync_cmd import sync_cmd
from contrib.cli.commands.update_cmd import update_cmd
from contrib.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="contrib-flow")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Keep branches in sync with your team's git workflow."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(clean_cmd)
cli.add_command(commit_cmd)
cli.add_command(start_cmd)
cli.add_command(status_cmd)
cli.add_command(sync_cmd)
cli.add_command(update_cmd)


def main() -> None:
    """CLI entry point used by the `contrib` console script."""
    cli()
