"""Production GitHub implementation using the gh CLI."""

import json
import logging
from pathlib import Path

from contrib.gateway.command_runner.abc import CommandRunner
from contrib.gateway.github.abc import GitHub
from contrib.gateway.github.types import MergedPullRequest

logger = logging.getLogger(__name__)


class RealGitHub(GitHub):
    """Production implementation running ``gh`` through a CommandRunner."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def is_available(self, cwd: Path) -> bool:
        result = self._runner.run(["gh", "auth", "status"], cwd=cwd)
        if result.tool_missing:
            logger.debug("gh is not installed")
            return False
        return result.ok

    def get_merged_pr_for_branch(self, cwd: Path, branch: str) -> MergedPullRequest | None:
        result = self._runner.run(
            [
                "gh",
                "pr",
                "list",
                "--head",
                branch,
                "--state",
                "merged",
                "--json",
                "number,title,url",
                "--limit",
                "1",
            ],
            cwd=cwd,
        )
        if not result.ok:
            logger.debug("gh pr list failed for %s: %s", branch, result.stderr.strip())
            return None

        try:
            prs = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug("gh pr list returned invalid JSON for %s", branch)
            return None

        if not isinstance(prs, list) or not prs:
            return None
        pr = prs[0]
        if not isinstance(pr, dict) or not isinstance(pr.get("number"), int):
            return None
        return MergedPullRequest(
            number=pr["number"],
            title=str(pr.get("title", "")),
            url=str(pr.get("url", "")),
        )
