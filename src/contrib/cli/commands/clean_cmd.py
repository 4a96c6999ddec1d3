"""Delete merged (including squash-merged) local branches."""

import click

from contrib.cli.ensure_ideal import EnsureIdeal
from contrib.core.context import ContribContext
from contrib.core.git_state import check_git_state
from contrib.core.stale_branches import CleanupCandidate, find_cleanup_candidates
from contrib.core.workflow import resolve_base_branch, resolve_protected_branches
from contrib.gateway.git.types import GitCommandFailed
from contrib.output import success_prefix, user_output, warning_prefix


def _format_candidate(candidate: CleanupCandidate) -> str:
    reasons = ", ".join(candidate.reasons)
    mode = "force" if candidate.force_delete else "safe"
    line = f"  • {candidate.name} ({reasons}; {mode} delete)"
    if candidate.merged_pr is not None:
        line += f" PR #{candidate.merged_pr.number}"
    return line


@click.command("clean")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
@click.option("--no-pr-check", is_flag=True, help="Do not ask GitHub about merged PRs")
@click.pass_obj
def clean_cmd(ctx: ContribContext, yes: bool, no_pr_check: bool) -> None:
    """Delete merged branches and prune remote refs.

    Branches merged with a merge commit are deleted with `git branch -d`.
    Branches whose remote is gone or whose PR was merged (squash merges)
    are deleted with `git branch -D`.
    """
    config = EnsureIdeal.ideal_state(ctx.config)
    EnsureIdeal.git_state(check_git_state(ctx.git, ctx.cwd, "clean"))
    user_output(click.style("contrib clean", bold=True))

    # Prune first so deleted remote branches show up as gone
    user_output(f"Pruning {config.origin} remote refs...")
    prune = ctx.git.prune_remote(ctx.cwd, config.origin)
    if isinstance(prune, GitCommandFailed):
        user_output(warning_prefix() + f"Could not prune remote: {prune.stderr.strip()}")

    candidates = find_cleanup_candidates(
        ctx.git,
        ctx.github,
        ctx.cwd,
        base_branch=resolve_base_branch(config),
        protected=resolve_protected_branches(config),
        current_branch=ctx.git.get_current_branch(ctx.cwd),
        check_prs=not no_pr_check,
    )

    if not candidates:
        user_output("No merged branches to clean up.")
        return

    user_output(click.style("Branches to delete:", bold=True))
    for candidate in candidates:
        user_output(_format_candidate(candidate))

    plural = "es" if len(candidates) != 1 else ""
    if not yes and not ctx.console.confirm(
        f"Delete {len(candidates)} merged branch{plural}?", default=False
    ):
        user_output("Skipped branch deletion.")
        return

    failures = 0
    for candidate in candidates:
        result = ctx.git.delete_branch(ctx.cwd, candidate.name, force=candidate.force_delete)
        if isinstance(result, GitCommandFailed):
            failures += 1
            user_output(
                warning_prefix() + f"Failed to delete {candidate.name}: {result.stderr.strip()}"
            )
        else:
            user_output(f"{success_prefix()} Deleted {candidate.name}")

    if failures:
        raise SystemExit(1)
