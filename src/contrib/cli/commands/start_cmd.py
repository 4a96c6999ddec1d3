"""Create a feature branch from the latest base branch."""

import click

from contrib.cli.commands.lifecycle_helpers import resolve_branch_name
from contrib.cli.ensure_ideal import EnsureIdeal
from contrib.core.branch_lifecycle import BranchLifecycleManager
from contrib.core.context import ContribContext
from contrib.core.git_state import check_git_state
from contrib.core.workflow import (
    resolve_base_branch,
    resolve_protected_branches,
    resolve_sync_target,
)
from contrib.gateway.git.types import GitCommandFailed, GitCommandSucceeded
from contrib.non_ideal_state import UncommittedChanges
from contrib.output import success_prefix, user_output, warning_prefix


@click.command("start")
@click.argument("name")
@click.pass_obj
def start_cmd(ctx: ContribContext, name: str) -> None:
    """Create a new feature branch from the latest base branch.

    NAME is a branch name such as feature/login, or a short description
    ("fix login timeout") that is turned into one.
    """
    config = EnsureIdeal.ideal_state(ctx.config)
    EnsureIdeal.git_state(check_git_state(ctx.git, ctx.cwd, "start a branch"))
    if ctx.git.has_uncommitted_changes(ctx.cwd):
        EnsureIdeal.ideal_state(UncommittedChanges(action="creating a branch"))

    base_branch = resolve_base_branch(config)
    sync = resolve_sync_target(config)
    manager = BranchLifecycleManager(
        git=ctx.git,
        cwd=ctx.cwd,
        sync_target=sync,
        base_branch=base_branch,
        protected=resolve_protected_branches(config),
    )

    branch_name = resolve_branch_name(ctx.console, config, name)
    name_error = manager.check_new_branch_name(branch_name)
    if name_error is not None:
        EnsureIdeal.ideal_state(name_error)

    user_output(click.style(f"contrib start ({config.workflow}, {config.role})", bold=True))
    user_output(f"Fetching {sync.remote}...")
    fetch = ctx.git.fetch_remote(ctx.cwd, sync.remote)
    if isinstance(fetch, GitCommandFailed):
        user_output(warning_prefix() + fetch.message)

    # Branch from the remote ref when the local base cannot be brought up to date
    start_point = base_branch
    base_update = manager.update_local_branch(base_branch, sync.ref)
    if not isinstance(base_update, GitCommandSucceeded):
        user_output(warning_prefix() + base_update.message)
        start_point = sync.ref

    EnsureIdeal.ideal_state(ctx.git.create_branch(ctx.cwd, branch_name, start_point))
    user_output(f"{success_prefix()} Created {branch_name} from {start_point}")
