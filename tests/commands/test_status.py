"""Tests for the status command."""

from pathlib import Path

from click.testing import CliRunner

from contrib.cli.cli import cli
from contrib.core.context import ContribContext
from contrib.gateway.git.fake import FakeGit
from contrib.gateway.git.types import GitState
from tests.test_utils.configs import clean_flow_config, github_flow_config


def test_status_compares_workflow_branches_and_current_branch() -> None:
    git = FakeGit(
        current_branch="feature/a",
        left_right_counts={
            ("origin/main", "main"): (0, 0),
            ("upstream/dev", "dev"): (4, 0),
            ("dev", "feature/a"): (1, 2),
        },
    )
    ctx = ContribContext.for_test(git=git, config=clean_flow_config())

    result = CliRunner().invoke(cli, ["status"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Role: contributor" in result.output
    assert git.fetched_remotes == ["origin", "upstream"]
    assert git.left_right_queries == [
        ("origin/main", "main"),
        ("upstream/dev", "dev"),
        ("dev", "feature/a"),
    ]
    assert "diverged" in result.output
    assert "Working tree clean" in result.output


def test_status_no_fetch() -> None:
    git = FakeGit(current_branch="main")
    ctx = ContribContext.for_test(git=git, config=github_flow_config())

    result = CliRunner().invoke(cli, ["status", "--no-fetch"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.fetched_remotes == []
    # main is protected, so only the workflow row is compared
    assert git.left_right_queries == [("origin/main", "main")]


def test_status_lists_changed_files() -> None:
    git = FakeGit(current_branch="main", changed_files=["a.py", "docs/b.md"])
    ctx = ContribContext.for_test(git=git, config=github_flow_config())

    result = CliRunner().invoke(cli, ["status", "--no-fetch"], obj=ctx)

    assert "2 changed files in working tree" in result.output
    assert "docs/b.md" in result.output


def test_status_reports_in_progress_operation_without_failing() -> None:
    git = FakeGit(
        current_branch="main",
        git_state=GitState(
            lock_file=False, in_progress_op="merge", shallow=False, git_dir=Path("/r/.git")
        ),
    )
    ctx = ContribContext.for_test(git=git, config=github_flow_config())

    result = CliRunner().invoke(cli, ["status", "--no-fetch"], obj=ctx)

    assert result.exit_code == 0
    assert "a merge is in progress" in result.output
