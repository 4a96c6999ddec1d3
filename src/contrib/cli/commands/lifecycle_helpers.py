"""Prompting and reporting shared by commands that relocate local work."""

from contrib.core.branch_lifecycle import (
    CancelWork,
    DecideFn,
    DiscardWork,
    LocalWork,
    SaveWork,
    StepReport,
    WorkChoice,
    WorkDecision,
)
from contrib.core.branch_names import (
    format_branch_name,
    looks_like_natural_language,
    parse_prefix,
)
from contrib.core.config import WorkflowConfig
from contrib.gateway.console.abc import Console
from contrib.output import error_prefix, success_prefix, user_output

CHOICE_HELP: dict[WorkChoice, str] = {
    "save": "save: move your changes to a new branch",
    "discard": "discard: throw away local changes and clean up",
    "cancel": "cancel: change nothing",
}


def resolve_branch_name(console: Console, config: WorkflowConfig, name: str) -> str:
    """Turn a branch name or a short description into a prefixed branch name.

    Names that already carry a configured prefix are kept as typed. A
    description whose first word is a prefix ("fix login timeout") uses it;
    anything else asks for a branch type.
    """
    name = name.strip()
    if parse_prefix(name, config.branch_prefixes) is not None:
        return name
    if looks_like_natural_language(name):
        first, _, rest = name.partition(" ")
        if first.lower() in config.branch_prefixes and rest.strip():
            return format_branch_name(first.lower(), rest)
    prefix = console.select(f"Choose a branch type for {name}", list(config.branch_prefixes))
    return format_branch_name(prefix, name)


def prompt_new_branch_name(console: Console, config: WorkflowConfig) -> str:
    name = console.prompt_text("What are you going to work on?", default=None)
    return resolve_branch_name(console, config, name)


def describe_local_work(branch: str, work: LocalWork) -> None:
    if work.unpushed_commits is None:
        user_output(
            f"Could not count the commits on {branch} that exist only locally; "
            "treating them as local work."
        )
    elif work.unpushed_commits > 0:
        plural = "s" if work.unpushed_commits != 1 else ""
        user_output(f"Found {work.unpushed_commits} unpushed commit{plural} on {branch}.")
    if work.uncommitted:
        user_output("You have uncommitted changes in the working tree.")


def make_decide(console: Console, config: WorkflowConfig, branch: str) -> DecideFn:
    """Build the decision callback for BranchLifecycleManager.retire_branch."""

    def decide(work: LocalWork, choices: tuple[WorkChoice, ...]) -> WorkDecision:
        describe_local_work(branch, work)
        for choice in choices:
            user_output(f"  {CHOICE_HELP[choice]}")
        answer = console.select(
            f"{branch} has local work. What would you like to do?", list(choices)
        )
        if answer == "save":
            return SaveWork(new_branch=prompt_new_branch_name(console, config))
        if answer == "discard":
            return DiscardWork()
        return CancelWork()

    return decide


def render_step_report(report: StepReport) -> None:
    """Show what ran, what failed and what is left to do by hand."""
    for step in report.completed:
        user_output(f"{success_prefix()} {step}")
    if report.failure is None:
        return
    user_output(error_prefix() + f"{report.failure.step}: {report.failure.message}")
    for step in report.pending:
        user_output(f"  Not run: {step}")
