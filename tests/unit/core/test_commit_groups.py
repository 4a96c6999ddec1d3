"""Tests for parsing and validating AI commit groupings."""

from contrib.core.commit_groups import (
    CommitGroup,
    CommitGroupParseError,
    NoUsableCommitGroups,
    ensure_usable_groups,
    extract_json,
    find_ungrouped_files,
    parse_commit_groups,
    validate_commit_groups,
)


def test_validation_strips_files_that_are_not_changed() -> None:
    groups = [CommitGroup(files=("a.py", "ghost.py"), message="feat: add a")]

    assert validate_commit_groups(groups, ["a.py", "b.py"]) == [
        CommitGroup(files=("a.py",), message="feat: add a")
    ]


def test_validation_drops_groups_left_empty() -> None:
    groups = [
        CommitGroup(files=("ghost.py",), message="chore: nothing"),
        CommitGroup(files=("b.py",), message="fix: b"),
    ]

    assert validate_commit_groups(groups, ["b.py"]) == [
        CommitGroup(files=("b.py",), message="fix: b")
    ]


def test_file_claimed_by_two_groups_stays_in_the_first() -> None:
    """Each file is committed once; a later group that loses every file is dropped."""
    groups = [
        CommitGroup(files=("a.py", "b.py"), message="feat: a and b"),
        CommitGroup(files=("a.py", "c.py"), message="fix: a and c"),
        CommitGroup(files=("b.py",), message="docs: b again"),
    ]

    assert validate_commit_groups(groups, ["a.py", "b.py", "c.py"]) == [
        CommitGroup(files=("a.py", "b.py"), message="feat: a and b"),
        CommitGroup(files=("c.py",), message="fix: a and c"),
    ]

def test_every_group_empty_is_a_non_ideal_state() -> None:
    groups = validate_commit_groups(
        [CommitGroup(files=("ghost.py",), message="x")], ["a.py"]
    )

    result = ensure_usable_groups(groups)

    assert isinstance(result, NoUsableCommitGroups)
    assert "Commit manually" in result.message


def test_ungrouped_files_are_reported_in_working_tree_order() -> None:
    groups = [CommitGroup(files=("b.py",), message="fix: b")]

    assert find_ungrouped_files(groups, ["a.py", "b.py", "c.py"]) == ["a.py", "c.py"]


def test_parse_accepts_fenced_json() -> None:
    raw = '```json\n[{"files": ["a.py"], "message": "feat: a"}]\n```'

    assert parse_commit_groups(raw) == [CommitGroup(files=("a.py",), message="feat: a")]


def test_parse_accepts_json_wrapped_in_prose() -> None:
    raw = 'Here you go:\n[{"files": ["a.py"], "message": "feat: a"}]\nHope that helps.'

    assert parse_commit_groups(raw) == [CommitGroup(files=("a.py",), message="feat: a")]


def test_parse_rejects_invalid_json() -> None:
    result = parse_commit_groups("not json at all")

    assert isinstance(result, CommitGroupParseError)
    assert result.reason == "AI response is not valid JSON"


def test_parse_rejects_non_array_and_empty_array() -> None:
    for raw in ('{"files": []}', "[]"):
        result = parse_commit_groups(raw)
        assert isinstance(result, CommitGroupParseError)
        assert result.reason == "AI response was not a JSON array of commit groups"


def test_parse_rejects_group_missing_message() -> None:
    result = parse_commit_groups('[{"files": ["a.py"]}]')

    assert isinstance(result, CommitGroupParseError)
    assert result.reason == "AI returned groups with missing files or message"


def test_extract_json_leaves_bare_json_alone() -> None:
    assert extract_json('  [1, 2]  ') == "[1, 2]"
