"""Tests for choosing between a plain and an --onto rebase."""

from pathlib import Path

from contrib.core.rebase_strategy import (
    OntoRebase,
    PlainRebase,
    apply_rebase_strategy,
    branch_name_from_ref,
    determine_rebase_strategy,
)
from contrib.gateway.git.fake import FakeGit

CWD = Path("/repo")
C0 = "c0c0c0c0c0c0c0c0"
C1 = "c1c1c1c1c1c1c1c1"


def _stacked_git(*, fork_from_upstream: str | None, fork_from_sync: str | None) -> FakeGit:
    """feature/b tracks origin/feature/a: it was branched off another feature."""
    merge_bases: dict[tuple[str, str], str] = {}
    if fork_from_upstream is not None:
        merge_bases[("HEAD", "origin/feature/a")] = fork_from_upstream
    if fork_from_sync is not None:
        merge_bases[("HEAD", "origin/dev")] = fork_from_sync
    return FakeGit(
        current_branch="feature/b",
        upstream_ref="origin/feature/a",
        commit_hashes={"origin/feature/a": C1},
        merge_bases=merge_bases,
    )


def test_stacked_branch_with_diverged_fork_points_uses_onto() -> None:
    """feature/a was squash-merged: its commits must not be replayed again."""
    git = _stacked_git(fork_from_upstream=C1, fork_from_sync=C0)

    strategy = determine_rebase_strategy(git, CWD, "feature/b", "origin/dev")

    assert strategy == OntoRebase(old_base=C1)
    assert git.merge_base_queries == [("HEAD", "origin/feature/a"), ("HEAD", "origin/dev")]


def test_stacked_branch_with_matching_fork_points_uses_plain() -> None:
    git = _stacked_git(fork_from_upstream=C0, fork_from_sync=C0)

    assert determine_rebase_strategy(git, CWD, "feature/b", "origin/dev") == PlainRebase()


def test_no_upstream_uses_plain() -> None:
    git = FakeGit(current_branch="feature/b")

    assert determine_rebase_strategy(git, CWD, "feature/b", "origin/dev") == PlainRebase()
    assert git.merge_base_queries == []


def test_deleted_upstream_uses_plain() -> None:
    git = FakeGit(current_branch="feature/b", upstream_ref="origin/feature/a")

    assert determine_rebase_strategy(git, CWD, "feature/b", "origin/dev") == PlainRebase()


def test_branch_tracking_its_own_remote_copy_uses_plain() -> None:
    git = FakeGit(
        current_branch="feature/b",
        upstream_ref="origin/feature/b",
        commit_hashes={"origin/feature/b": C1},
        merge_bases={("HEAD", "origin/feature/b"): C1, ("HEAD", "origin/dev"): C0},
    )

    assert determine_rebase_strategy(git, CWD, "feature/b", "origin/dev") == PlainRebase()


def test_unresolvable_fork_point_falls_back_to_plain() -> None:
    git = _stacked_git(fork_from_upstream=None, fork_from_sync=C0)

    assert determine_rebase_strategy(git, CWD, "feature/b", "origin/dev") == PlainRebase()


def test_strategy_is_deterministic_for_fixed_answers() -> None:
    results = {
        determine_rebase_strategy(
            _stacked_git(fork_from_upstream=C1, fork_from_sync=C0), CWD, "feature/b", "origin/dev"
        )
        for _ in range(3)
    }

    assert results == {OntoRebase(old_base=C1)}


def test_apply_runs_matching_git_rebase() -> None:
    git = FakeGit()

    apply_rebase_strategy(git, CWD, PlainRebase(), "origin/dev")
    apply_rebase_strategy(git, CWD, OntoRebase(old_base=C1), "origin/dev")

    assert git.rebases == [("rebase", "origin/dev"), ("rebase --onto", "origin/dev", C1)]


def test_describe_shortens_old_base() -> None:
    assert OntoRebase(old_base=C1).describe("origin/dev") == "git rebase --onto origin/dev c1c1c1c"
    assert PlainRebase().describe("origin/dev") == "git rebase origin/dev"


def test_branch_name_from_ref() -> None:
    assert branch_name_from_ref("origin/feature/a") == "feature/a"
    assert branch_name_from_ref("main") == "main"
