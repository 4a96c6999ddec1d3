"""Show how local branches relate to their remotes."""

import click
from rich.console import Console
from rich.table import Table

from contrib.cli.ensure_ideal import EnsureIdeal
from contrib.core.config import has_dev_branch
from contrib.core.context import ContribContext
from contrib.core.divergence import Divergence, compute_divergence
from contrib.core.git_state import GitStateError, check_git_state
from contrib.core.workflow import (
    WORKFLOW_DESCRIPTIONS,
    resolve_base_branch,
    resolve_protected_branches,
    resolve_sync_remote,
)
from contrib.output import user_output, warning_prefix


def _format_relationship(div: Divergence) -> str:
    status_map = {
        "in-sync": "[green]in sync[/green]",
        "ahead-only": "[yellow]ahead[/yellow]",
        "behind-only": "[red]behind[/red]",
        "diverged": "[red]diverged[/red]",
    }
    return status_map[div.relationship]


@click.command("status")
@click.option("--fetch/--no-fetch", default=True, help="Fetch remotes before comparing")
@click.pass_obj
def status_cmd(ctx: ContribContext, fetch: bool) -> None:
    """Show sync status of the workflow branches and the current branch."""
    config = EnsureIdeal.ideal_state(ctx.config)

    user_output(f"Workflow: {WORKFLOW_DESCRIPTIONS[config.workflow]}")
    user_output(f"Role: {config.role}")

    state = check_git_state(ctx.git, ctx.cwd, "mutate the repository")
    if isinstance(state, GitStateError):
        user_output(warning_prefix() + state.message)
    elif state.shallow_warning is not None:
        user_output(warning_prefix() + state.shallow_warning.message)

    if fetch:
        remotes = dict.fromkeys([config.origin, resolve_sync_remote(config)])
        for remote in remotes:
            ctx.git.fetch_remote(ctx.cwd, remote)

    rows: list[tuple[str, str]] = [(config.main_branch, f"{config.origin}/{config.main_branch}")]
    if has_dev_branch(config.workflow) and config.dev_branch:
        rows.append((config.dev_branch, f"{resolve_sync_remote(config)}/{config.dev_branch}"))

    current = ctx.git.get_current_branch(ctx.cwd)
    if current is not None and not resolve_protected_branches(config).is_protected(current):
        rows.append((current, resolve_base_branch(config)))

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Compared to", style="dim", no_wrap=True)
    table.add_column("Ahead", justify="right")
    table.add_column("Behind", justify="right")
    table.add_column("Status", no_wrap=True)

    for branch, ref in rows:
        div = compute_divergence(ctx.git, ctx.cwd, branch, ref)
        label = f"{branch} *" if branch == current else branch
        table.add_row(label, ref, str(div.ahead), str(div.behind), _format_relationship(div))

    # Output table to stderr (consistent with user_output convention)
    console = Console(stderr=True, force_terminal=True, width=200)
    console.print(table)

    changed = ctx.git.get_changed_files(ctx.cwd)
    if changed:
        plural = "s" if len(changed) != 1 else ""
        user_output(warning_prefix() + f"{len(changed)} changed file{plural} in working tree")
        for path in changed:
            user_output(f"  {path}")
    else:
        user_output("Working tree clean")
