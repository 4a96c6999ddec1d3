"""Fake command runner for testing gateway parsing without spawning processes."""

from pathlib import Path

from contrib.gateway.command_runner.abc import CommandResult, CommandRunner


class FakeCommandRunner(CommandRunner):
    """In-memory command runner returning canned results.

    Results are keyed by the full argv tuple. Commands with no configured
    result return ``default``, which is a failing result unless overridden.

    Mutation Tracking:
    -----------------
    - calls: every (argv, cwd) pair passed to run(), in order
    """

    def __init__(
        self,
        *,
        results: dict[tuple[str, ...], CommandResult] | None = None,
        default: CommandResult | None = None,
    ) -> None:
        self._results = results if results is not None else {}
        self._default = (
            default
            if default is not None
            else CommandResult(returncode=1, stdout="", stderr="fake: no result configured")
        )
        self._calls: list[tuple[tuple[str, ...], Path]] = []

    def run(self, cmd: list[str], *, cwd: Path) -> CommandResult:
        key = tuple(cmd)
        self._calls.append((key, cwd))
        return self._results.get(key, self._default)

    @property
    def calls(self) -> list[tuple[tuple[str, ...], Path]]:
        """Commands run during the test. For test assertions only."""
        return self._calls.copy()

    @property
    def commands(self) -> list[tuple[str, ...]]:
        """Argv tuples run during the test, without cwd."""
        return [cmd for cmd, _ in self._calls]
