"""Tests for branch naming helpers."""

import pytest

from contrib.core.branch_names import (
    format_branch_name,
    is_valid_branch_name,
    looks_like_natural_language,
    parse_prefix,
)


def test_format_branch_name_kebab_cases_free_text() -> None:
    assert format_branch_name("feature", "Add OAuth Login!") == "feature/add-oauth-login"
    assert format_branch_name("fix", "  crash on  start ") == "fix/crash-on-start"


def test_prefix_detection_requires_slash() -> None:
    assert parse_prefix("feature/login") == "feature"
    assert parse_prefix("feature-login") is None
    assert parse_prefix("docs/readme") == "docs"
    assert parse_prefix("misc/thing") is None
    assert parse_prefix("release/1.0", ("release", "hotfix")) == "release"


@pytest.mark.parametrize(
    "name",
    ["feature/login", "fix/issue-12", "v1.2.3", "docs/api_reference"],
)
def test_valid_branch_names(name: str) -> None:
    assert is_valid_branch_name(name)


@pytest.mark.parametrize(
    "name",
    [
        "",
        "HEAD",
        "-rf",
        "a..b",
        "feat@{1}",
        "has space",
        "what?",
        "feature/.hidden",
        "branch.lock",
        "trailing/",
        "double//slash",
        "trailing.",
    ],
)
def test_invalid_branch_names(name: str) -> None:
    assert not is_valid_branch_name(name)


def test_natural_language_detection() -> None:
    assert looks_like_natural_language("fix the login page")
    assert not looks_like_natural_language("fix/login-page")
    assert not looks_like_natural_language("login")
