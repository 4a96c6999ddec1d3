"""Tests for FakeConsole."""

import pytest

from contrib.gateway.console.fake import FakeConsole


def test_answers_pop_in_order_and_prompts_are_recorded() -> None:
    console = FakeConsole(confirm_responses=[True, False], select_responses=["b"])

    assert console.confirm("first?", default=True)
    assert not console.confirm("second?", default=True)
    assert console.select("pick", ["a", "b"]) == "b"
    assert console.prompts == [("confirm", "first?"), ("confirm", "second?"), ("select", "pick")]
    assert console.offered_choices == [["a", "b"]]


def test_unexpected_prompt_fails_loudly() -> None:
    with pytest.raises(AssertionError, match="Unexpected text prompt"):
        FakeConsole().prompt_text("name?", default=None)


def test_answer_outside_choices_fails() -> None:
    console = FakeConsole(select_responses=["discard"])

    with pytest.raises(AssertionError):
        console.select("what now?", ["save", "cancel"])
