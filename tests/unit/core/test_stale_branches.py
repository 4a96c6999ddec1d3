"""Tests for merged-branch detection, including squash merges."""

from pathlib import Path

from contrib.core.stale_branches import (
    CleanupCandidate,
    StaleBranch,
    detect_stale_branch,
    find_cleanup_candidates,
)
from contrib.core.workflow import resolve_protected_branches
from contrib.gateway.git.fake import FakeGit
from contrib.gateway.git.types import LocalBranchInfo
from contrib.gateway.github.fake import FakeGitHub
from contrib.gateway.github.types import MergedPullRequest
from tests.test_utils.configs import git_flow_config

CWD = Path("/repo")
PR = MergedPullRequest(number=42, title="Add login", url="https://github.com/o/r/pull/42")


def _branch(name: str, *, gone: bool = False, current: bool = False) -> LocalBranchInfo:
    upstream = f"origin/{name}" if gone else None
    return LocalBranchInfo(name=name, is_current=current, upstream=upstream, gone=gone)


def _find(git: FakeGit, github: FakeGitHub, *, check_prs: bool = True) -> list[CleanupCandidate]:
    return find_cleanup_candidates(
        git,
        github,
        CWD,
        base_branch="develop",
        protected=resolve_protected_branches(git_flow_config()),
        current_branch="feature/current",
        check_prs=check_prs,
    )


def test_merged_branch_uses_safe_delete() -> None:
    git = FakeGit(
        merged_branches={"develop": ["feature/merged"]},
        local_branches=[_branch("feature/merged")],
    )

    candidates = _find(git, FakeGitHub())

    assert candidates == [
        CleanupCandidate(name="feature/merged", reasons=("merged",), merged_pr=None)
    ]
    assert not candidates[0].force_delete


def test_gone_tracking_ref_implies_force_delete() -> None:
    git = FakeGit(local_branches=[_branch("feature/squashed", gone=True)])

    candidates = _find(git, FakeGitHub(), check_prs=False)

    assert [c.reasons for c in candidates] == [("gone",)]
    assert candidates[0].force_delete


def test_merged_pr_implies_force_delete() -> None:
    git = FakeGit(local_branches=[_branch("feature/login")])
    github = FakeGitHub(merged_prs={"feature/login": PR})

    candidates = _find(git, github)

    assert candidates == [
        CleanupCandidate(name="feature/login", reasons=("pr-merged",), merged_pr=PR)
    ]
    assert candidates[0].force_delete


def test_skips_current_base_and_protected_branches() -> None:
    git = FakeGit(
        merged_branches={"develop": ["main", "develop", "release/1.0.0", "feature/current"]},
        local_branches=[
            _branch("main"),
            _branch("develop"),
            _branch("release/1.0.0", gone=True),
            _branch("feature/current", current=True, gone=True),
        ],
    )

    assert _find(git, FakeGitHub()) == []


def test_pr_lookup_skipped_for_branches_git_already_considers_merged() -> None:
    git = FakeGit(
        merged_branches={"develop": ["feature/merged"]},
        local_branches=[_branch("feature/merged"), _branch("feature/open")],
    )
    github = FakeGitHub()

    _find(git, github)

    assert github.pr_queries == ["feature/open"]


def test_pr_lookup_skipped_when_gh_unavailable_or_disabled() -> None:
    git = FakeGit(local_branches=[_branch("feature/login")])
    unavailable = FakeGitHub(available=False, merged_prs={"feature/login": PR})
    disabled = FakeGitHub(merged_prs={"feature/login": PR})

    assert _find(git, unavailable) == []
    assert _find(git, disabled, check_prs=False) == []
    assert unavailable.pr_queries == []
    assert disabled.pr_queries == []


def test_detect_stale_branch_reports_gone_and_pr() -> None:
    git = FakeGit(local_branches=[_branch("feature/login", gone=True)])
    github = FakeGitHub(merged_prs={"feature/login": PR})

    assert detect_stale_branch(git, github, CWD, "feature/login") == StaleBranch(
        branch="feature/login", gone=True, merged_pr=PR
    )


def test_detect_stale_branch_none_for_active_branch() -> None:
    git = FakeGit(local_branches=[_branch("feature/active")])

    assert detect_stale_branch(git, FakeGitHub(), CWD, "feature/active") is None
