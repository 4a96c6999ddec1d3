"""Fake console for testing interactive flows."""

from contrib.gateway.console.abc import Console


class FakeConsole(Console):
    """Answers prompts from pre-configured queues.

    Each prompt pops the next answer from its queue. An exhausted queue raises
    AssertionError so a test never hangs on an unexpected prompt.

    Mutation Tracking:
    -----------------
    - prompts: (kind, message) for every prompt shown
    - offered_choices: the choice list passed to each select()
    """

    def __init__(
        self,
        *,
        confirm_responses: list[bool] | None = None,
        select_responses: list[str] | None = None,
        text_responses: list[str] | None = None,
    ) -> None:
        self._confirm_responses = list(confirm_responses) if confirm_responses else []
        self._select_responses = list(select_responses) if select_responses else []
        self._text_responses = list(text_responses) if text_responses else []
        self._prompts: list[tuple[str, str]] = []
        self._offered_choices: list[list[str]] = []

    def confirm(self, message: str, *, default: bool) -> bool:
        self._prompts.append(("confirm", message))
        if not self._confirm_responses:
            raise AssertionError(f"Unexpected confirm prompt: {message}")
        return self._confirm_responses.pop(0)

    def select(self, message: str, choices: list[str]) -> str:
        self._prompts.append(("select", message))
        self._offered_choices.append(list(choices))
        if not self._select_responses:
            raise AssertionError(f"Unexpected select prompt: {message}")
        answer = self._select_responses.pop(0)
        if answer not in choices:
            raise AssertionError(f"Configured answer {answer!r} is not one of {choices}")
        return answer

    def prompt_text(self, message: str, *, default: str | None) -> str:
        self._prompts.append(("text", message))
        if not self._text_responses:
            raise AssertionError(f"Unexpected text prompt: {message}")
        return self._text_responses.pop(0)

    @property
    def prompts(self) -> list[tuple[str, str]]:
        return self._prompts.copy()

    @property
    def offered_choices(self) -> list[list[str]]:
        return [list(c) for c in self._offered_choices]
