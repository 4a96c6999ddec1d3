"""Sync the local base branch with its remote."""

from typing import Literal

import click

from contrib.cli.commands.lifecycle_helpers import prompt_new_branch_name, render_step_report
from contrib.cli.ensure_ideal import EnsureIdeal
from contrib.core.branch_lifecycle import BranchLifecycleManager
from contrib.core.config import WorkflowConfig, has_dev_branch
from contrib.core.context import ContribContext
from contrib.core.divergence import Divergence, compute_divergence
from contrib.core.git_state import check_git_state
from contrib.core.workflow import (
    SyncTarget,
    resolve_base_branch,
    resolve_protected_branches,
    resolve_sync_target,
)
from contrib.gateway.git.types import GitCommandFailed
from contrib.non_ideal_state import RefResolutionFailed, UncommittedChanges
from contrib.output import success_prefix, user_output, warning_prefix


LocalCommitsAction = Literal["cancel", "pull", "moved", "move-failed"]


def _describe_divergence(branch: str, ref: str, div: Divergence) -> str:
    if div.relationship == "in-sync":
        return f"{branch} is already in sync with {ref}"
    return f"{branch} is {div.ahead} ahead and {div.behind} behind {ref}"


def _handle_local_commits(
    ctx: ContribContext,
    config: WorkflowConfig,
    base_branch: str,
    sync: SyncTarget,
    div: Divergence,
) -> LocalCommitsAction:
    """Offer to move local commits off the base branch before pulling."""
    plural = "s" if div.ahead != 1 else ""
    user_output(
        warning_prefix()
        + f"You have {div.ahead} local commit{plural} on {base_branch} that aren't on the remote."
    )
    user_output("Pulling now could create a merge commit, which breaks clean history.")
    user_output("  move: move my commits to a new feature branch, then sync")
    user_output("  pull: pull anyway (may create a merge commit)")
    user_output("  cancel: change nothing")
    action = ctx.console.select("How would you like to handle this?", ["move", "pull", "cancel"])

    if action == "cancel":
        return "cancel"

    if action == "pull":
        user_output(warning_prefix() + "Proceeding with pull; a merge commit may be created.")
        return "pull"

    new_branch = prompt_new_branch_name(ctx.console, config)
    manager = BranchLifecycleManager(
        git=ctx.git,
        cwd=ctx.cwd,
        sync_target=sync,
        base_branch=base_branch,
        protected=resolve_protected_branches(config),
    )
    report = EnsureIdeal.ideal_state(
        manager.move_commits_to_new_branch(base_branch, new_branch, sync.ref)
    )
    render_step_report(report)
    if not report.ok:
        return "move-failed"

    user_output(f"{success_prefix()} {base_branch} is now in sync with {sync.ref}")
    user_output(f"Your commits are safe on {new_branch}.")
    user_output(
        f"Run `git checkout {new_branch}` then `contrib update` to rebase onto {base_branch}."
    )
    return "moved"


def _sync_main_branch(ctx: ContribContext, config: WorkflowConfig, base_branch: str) -> None:
    """Fast-forward main as well when a maintainer syncs a dev-branch workflow."""
    main = config.main_branch
    main_ref = f"{config.origin}/{main}"
    main_div = compute_divergence(ctx.git, ctx.cwd, main, main_ref)
    if main_div.behind == 0:
        return

    user_output(f"Also syncing {main}...")
    if isinstance(ctx.git.checkout_branch(ctx.cwd, main), GitCommandFailed):
        user_output(warning_prefix() + f"Could not check out {main}; skipped.")
        return
    result = ctx.git.pull(ctx.cwd, config.origin, main, ff_only=True)
    if isinstance(result, GitCommandFailed):
        user_output(warning_prefix() + result.message)
    else:
        user_output(f"{success_prefix()} {main} is now in sync with {main_ref}")
    EnsureIdeal.ideal_state(ctx.git.checkout_branch(ctx.cwd, base_branch))


@click.command("sync")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
def sync_cmd(ctx: ContribContext, yes: bool) -> None:
    """Sync the local base branch with the remote.

    Fetches the sync remote and fast-forwards the base branch. Local commits
    on the base branch can be moved to a new feature branch first.
    """
    config = EnsureIdeal.ideal_state(ctx.config)
    EnsureIdeal.git_state(check_git_state(ctx.git, ctx.cwd, "sync"))

    if ctx.git.has_uncommitted_changes(ctx.cwd):
        EnsureIdeal.ideal_state(UncommittedChanges(action="syncing"))

    base_branch = resolve_base_branch(config)
    sync = resolve_sync_target(config)
    user_output(click.style(f"contrib sync ({config.workflow}, {config.role})", bold=True))

    user_output(f"Fetching {sync.remote}...")
    EnsureIdeal.ideal_state(ctx.git.fetch_remote(ctx.cwd, sync.remote))
    if config.role == "contributor" and sync.remote != config.origin:
        origin_fetch = ctx.git.fetch_remote(ctx.cwd, config.origin)
        if isinstance(origin_fetch, GitCommandFailed):
            user_output(warning_prefix() + origin_fetch.message)

    if ctx.git.get_commit_hash(ctx.cwd, sync.ref) is None:
        EnsureIdeal.ideal_state(RefResolutionFailed(ref=sync.ref))

    div = compute_divergence(ctx.git, ctx.cwd, base_branch, sync.ref)
    user_output(_describe_divergence(base_branch, sync.ref, div))

    allow_merge_commit = False
    if div.ahead > 0 and ctx.git.get_current_branch(ctx.cwd) == base_branch:
        action = _handle_local_commits(ctx, config, base_branch, sync, div)
        if action == "cancel":
            user_output("No changes made.")
            return
        if action == "move-failed":
            raise SystemExit(1)
        if action == "moved":
            return
        allow_merge_commit = True

    if not yes and not ctx.console.confirm(
        f"This will pull {sync.ref} into local {base_branch}. Continue?", default=True
    ):
        user_output("Sync cancelled.")
        return

    EnsureIdeal.ideal_state(ctx.git.checkout_branch(ctx.cwd, base_branch))
    pull = ctx.git.pull(ctx.cwd, sync.remote, base_branch, ff_only=not allow_merge_commit)
    if isinstance(pull, GitCommandFailed):
        if allow_merge_commit:
            EnsureIdeal.ideal_state(pull)
        user_output(
            click.style("Error: ", fg="red")
            + f"Fast-forward pull failed. Your local {base_branch} may have diverged."
        )
        user_output("Run `contrib sync` again and choose `move` to keep your commits.")
        raise SystemExit(1)

    user_output(f"{success_prefix()} {base_branch} is now in sync with {sync.ref}")

    if has_dev_branch(config.workflow) and config.role == "maintainer":
        _sync_main_branch(ctx, config, base_branch)
