"""Tests for the top-level command group."""

from click.testing import CliRunner

from contrib.cli.cli import cli
from contrib.core.context import ContribContext


def test_help_lists_every_command() -> None:
    result = CliRunner().invoke(cli, ["--help"], obj=ContribContext.for_test())

    assert result.exit_code == 0, result.output
    for name in ("clean", "commit", "start", "status", "sync", "update"):
        assert name in result.output
    assert "Keep branches in sync" in result.output
