"""Rebase the current branch onto the latest base branch."""

import click

from contrib.cli.commands.lifecycle_helpers import make_decide, render_step_report
from contrib.cli.ensure_ideal import EnsureIdeal
from contrib.core.branch_lifecycle import BranchLifecycleManager, RetireOutcome
from contrib.core.config import WorkflowConfig
from contrib.core.context import ContribContext
from contrib.core.git_state import check_git_state
from contrib.core.rebase_strategy import (
    OntoRebase,
    apply_rebase_strategy,
    determine_rebase_strategy,
)
from contrib.core.stale_branches import StaleBranch, detect_stale_branch
from contrib.core.workflow import (
    resolve_base_branch,
    resolve_protected_branches,
    resolve_sync_target,
)
from contrib.gateway.git.types import GitCommandFailed, RebaseResult
from contrib.non_ideal_state import LocalCommitsOnBranch, UncommittedChanges
from contrib.output import success_prefix, user_output, warning_prefix


def _print_conflict_instructions(result: RebaseResult) -> None:
    user_output(warning_prefix() + "Rebase hit conflicts. Resolve them manually.")
    for path in result.conflict_files:
        user_output(f"  conflict: {path}")
    user_output(click.style("To resolve:", bold=True))
    user_output("  1. Fix conflicts in the affected files")
    user_output("  2. git add <resolved-files>")
    user_output("  3. git rebase --continue")
    user_output("  Or abort: git rebase --abort")


def _describe_stale(stale: StaleBranch) -> None:
    if stale.merged_pr is not None:
        pr = stale.merged_pr
        user_output(warning_prefix() + f"PR #{pr.number} ({pr.title}) has already been merged.")
        user_output(f"Link: {pr.url}")
    else:
        user_output(
            warning_prefix() + f"The remote branch for {stale.branch} is gone (merged or deleted)."
        )


def _report_outcome(outcome: RetireOutcome, base_branch: str) -> bool:
    """Print what happened; False when the command should exit non-zero."""
    render_step_report(outcome.report)
    if outcome.path == "cancelled":
        user_output("No changes made. You are still on your current branch.")
        return True
    if outcome.path == "untouched":
        user_output(f"No local changes found on {outcome.branch}.")
        user_output(
            "Use `contrib sync` to sync protected branches, or start a feature branch to work on."
        )
        return False

    if not outcome.report.ok:
        rebase = outcome.report.rebase
        if rebase is not None and not rebase.success:
            _print_conflict_instructions(rebase)
        return False

    if outcome.path == "saved":
        user_output(f"{success_prefix()} Your work is on {outcome.new_branch}, rebased and intact.")
    else:
        user_output(f"{success_prefix()} Deleted {outcome.branch}; you are now on {base_branch}.")
    return True


def _retire(
    ctx: ContribContext,
    config: WorkflowConfig,
    manager: BranchLifecycleManager,
    branch: str,
    tracking_remote: str,
) -> None:
    outcome = EnsureIdeal.ideal_state(
        manager.retire_branch(
            branch,
            tracking_remote=tracking_remote,
            decide=make_decide(ctx.console, config, branch),
        )
    )
    if not _report_outcome(outcome, manager.base_branch):
        raise SystemExit(1)


@click.command("update")
@click.pass_obj
def update_cmd(ctx: ContribContext) -> None:
    """Rebase the current branch onto the latest base branch.

    Uses `git rebase --onto` when the branch was stacked on another branch
    that has since been merged. A branch whose PR was already merged is
    retired instead, with the option to save any new work.
    """
    config = EnsureIdeal.ideal_state(ctx.config)
    EnsureIdeal.git_state(check_git_state(ctx.git, ctx.cwd, "update"))
    current_branch = EnsureIdeal.branch(ctx.git.get_current_branch(ctx.cwd))

    base_branch = resolve_base_branch(config)
    sync = resolve_sync_target(config)
    protected = resolve_protected_branches(config)
    manager = BranchLifecycleManager(
        git=ctx.git,
        cwd=ctx.cwd,
        sync_target=sync,
        base_branch=base_branch,
        protected=protected,
    )
    user_output(click.style("contrib update", bold=True))

    if protected.is_protected(current_branch):
        user_output(
            warning_prefix()
            + f"You're on {current_branch}, a protected branch. Updates apply to feature branches."
        )
        fetch = ctx.git.fetch_remote(ctx.cwd, config.origin)
        if isinstance(fetch, GitCommandFailed):
            user_output(warning_prefix() + fetch.message)
        _retire(ctx, config, manager, current_branch, config.origin)
        return

    stale = detect_stale_branch(ctx.git, ctx.github, ctx.cwd, current_branch)
    if stale is not None:
        _describe_stale(stale)
        _retire(ctx, config, manager, current_branch, sync.remote)
        return

    if ctx.git.has_uncommitted_changes(ctx.cwd):
        EnsureIdeal.ideal_state(UncommittedChanges(action="updating"))

    user_output(f"Updating {current_branch} with latest {base_branch}...")
    EnsureIdeal.ideal_state(ctx.git.fetch_remote(ctx.cwd, sync.remote))
    base_update = manager.update_local_branch(base_branch, sync.ref)
    if isinstance(base_update, LocalCommitsOnBranch):
        user_output(warning_prefix() + base_update.message)
    else:
        EnsureIdeal.ideal_state(base_update)

    strategy = determine_rebase_strategy(ctx.git, ctx.cwd, current_branch, sync.ref)
    if isinstance(strategy, OntoRebase):
        user_output(
            click.style(
                f"Using --onto rebase (branch was based on a different ref): "
                f"{strategy.describe(sync.ref)}",
                dim=True,
            )
        )

    result = apply_rebase_strategy(ctx.git, ctx.cwd, strategy, sync.ref)
    if not result.success:
        _print_conflict_instructions(result)
        raise SystemExit(1)

    user_output(f"{success_prefix()} {current_branch} has been rebased onto latest {base_branch}")
