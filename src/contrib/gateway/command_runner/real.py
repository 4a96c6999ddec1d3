"""Production command runner using subprocess."""

import logging
import subprocess
from pathlib import Path

from contrib.gateway.command_runner.abc import (
    TOOL_MISSING_EXIT_CODE,
    CommandResult,
    CommandRunner,
)

logger = logging.getLogger(__name__)


class RealCommandRunner(CommandRunner):
    """Runs commands with subprocess.run, blocking until they exit."""

    def run(self, cmd: list[str], *, cwd: Path) -> CommandResult:
        logger.debug("Running %s in %s", " ".join(cmd), cwd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            logger.debug("Executable not found: %s", cmd[0])
            return CommandResult(returncode=TOOL_MISSING_EXIT_CODE, stdout="", stderr=str(e))

        if completed.returncode != 0:
            logger.debug(
                "Command exited %d: %s", completed.returncode, completed.stderr.strip()
            )
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
