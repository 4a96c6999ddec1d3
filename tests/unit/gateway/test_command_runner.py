"""Tests for RealCommandRunner."""

import sys
from pathlib import Path

from contrib.gateway.command_runner.abc import TOOL_MISSING_EXIT_CODE
from contrib.gateway.command_runner.real import RealCommandRunner


def test_missing_executable_reports_127(tmp_path: Path) -> None:
    result = RealCommandRunner().run(["contrib-test-no-such-tool"], cwd=tmp_path)

    assert result.returncode == TOOL_MISSING_EXIT_CODE
    assert result.tool_missing


def test_captures_output_and_exit_code(tmp_path: Path) -> None:
    result = RealCommandRunner().run(
        [sys.executable, "-c", "import sys; print('out'); sys.exit(3)"], cwd=tmp_path
    )

    assert result.returncode == 3
    assert result.stdout.strip() == "out"
