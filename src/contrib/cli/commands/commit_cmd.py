"""Commit the working tree as several commits from an AI-proposed grouping."""

from typing import TextIO

import click

from contrib.cli.commands.lifecycle_helpers import render_step_report
from contrib.cli.ensure_ideal import EnsureIdeal
from contrib.core.branch_lifecycle import Step, run_steps
from contrib.core.commit_groups import (
    CommitGroup,
    ensure_usable_groups,
    find_ungrouped_files,
    parse_commit_groups,
    validate_commit_groups,
)
from contrib.core.context import ContribContext
from contrib.core.git_state import check_git_state
from contrib.output import success_prefix, user_output, warning_prefix


def _commit_steps(ctx: ContribContext, group: CommitGroup) -> list[Step]:
    paths = list(group.files)
    return [
        (f"stage {', '.join(paths)}", lambda: ctx.git.stage_files(ctx.cwd, paths)),
        (f"commit {group.message}", lambda: ctx.git.commit(ctx.cwd, group.message, paths)),
    ]


@click.command("commit")
@click.option(
    "--groups",
    "groups_file",
    type=click.File("r"),
    required=True,
    help="JSON grouping of changed files into commits ('-' reads stdin)",
)
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
def commit_cmd(ctx: ContribContext, groups_file: TextIO, yes: bool) -> None:
    """Split the working tree into several commits.

    The grouping is a JSON array of {"files": [...], "message": "..."}
    objects, as produced by an AI assistant. Markdown fences and surrounding
    prose are ignored. Files that are not changed are dropped, a file listed
    twice stays in its first group, and files no group claims are left
    uncommitted.
    """
    EnsureIdeal.git_state(check_git_state(ctx.git, ctx.cwd, "commit"))
    changed_files = ctx.git.get_changed_files(ctx.cwd)
    if not changed_files:
        user_output("Nothing to commit.")
        return

    proposed = EnsureIdeal.ideal_state(parse_commit_groups(groups_file.read()))
    groups = EnsureIdeal.ideal_state(
        ensure_usable_groups(validate_commit_groups(proposed, changed_files))
    )

    user_output(click.style("contrib commit", bold=True))
    for index, group in enumerate(groups, start=1):
        user_output(f"  {index}. {group.message}")
        for path in group.files:
            user_output(click.style(f"       {path}", dim=True))
    ungrouped = find_ungrouped_files(groups, changed_files)
    if ungrouped:
        user_output(
            warning_prefix() + "Not in any group, left uncommitted: " + ", ".join(ungrouped)
        )

    plural = "s" if len(groups) != 1 else ""
    if not yes and not ctx.console.confirm(
        f"Create {len(groups)} commit{plural}?", default=True
    ):
        user_output("No commits created.")
        return

    steps = [step for group in groups for step in _commit_steps(ctx, group)]
    report = run_steps(steps)
    render_step_report(report)
    if not report.ok:
        raise SystemExit(1)
    user_output(f"{success_prefix()} Created {len(groups)} commit{plural}")
