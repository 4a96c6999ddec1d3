"""Application context with dependency injection."""

import logging
from dataclasses import dataclass
from pathlib import Path

from contrib.core.config import (
    ConfigInvalid,
    ConfigNotFound,
    WorkflowConfig,
    default_workflow_config,
    load_workflow_config,
)
from contrib.gateway.command_runner.real import RealCommandRunner
from contrib.gateway.console.abc import Console
from contrib.gateway.console.real import RealConsole
from contrib.gateway.git.abc import Git
from contrib.gateway.git.real import RealGit
from contrib.gateway.github.abc import GitHub
from contrib.gateway.github.real import RealGitHub
from contrib.non_ideal_state import NotInRepository, ToolMissing

logger = logging.getLogger(__name__)

ConfigResult = WorkflowConfig | ConfigNotFound | ConfigInvalid | NotInRepository | ToolMissing


@dataclass(frozen=True)
class ContribContext:
    """Immutable context holding all dependencies for contrib commands.

    Created at the CLI entry point and passed to commands through click.
    Configuration problems are kept as values so that each command decides
    whether it needs a config at all.
    """

    git: Git
    github: GitHub
    console: Console
    cwd: Path  # Current working directory at CLI invocation
    repo_root: Path | None
    config: ConfigResult

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        console: Console | None = None,
        cwd: Path | None = None,
        repo_root: Path | None = None,
        config: ConfigResult | None = None,
    ) -> "ContribContext":
        """Create test context with fakes for every unspecified dependency.

        Example:
            >>> git = FakeGit(current_branch="feature/a")
            >>> ctx = ContribContext.for_test(git=git, config=github_flow_config())
        """
        from contrib.gateway.console.fake import FakeConsole
        from contrib.gateway.git.fake import FakeGit
        from contrib.gateway.github.fake import FakeGitHub

        resolved_cwd = cwd if cwd is not None else Path("/test/repo")
        return ContribContext(
            git=git if git is not None else FakeGit(),
            github=github if github is not None else FakeGitHub(),
            console=console if console is not None else FakeConsole(),
            cwd=resolved_cwd,
            repo_root=repo_root if repo_root is not None else resolved_cwd,
            config=config if config is not None else default_workflow_config(),
        )


def discover_config(git: Git, cwd: Path) -> tuple[Path | None, ConfigResult]:
    """Find the repository root and load its configuration."""
    if not git.is_available(cwd):
        return None, ToolMissing(tool="git", hint="Install git from https://git-scm.com/")
    repo_root = git.get_repository_root(cwd)
    if repo_root is None:
        return None, NotInRepository(cwd=str(cwd))
    return repo_root, load_workflow_config(repo_root)


def create_context() -> ContribContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    cwd = Path.cwd()
    runner = RealCommandRunner()
    git = RealGit(runner)
    repo_root, config = discover_config(git, cwd)
    logger.debug("Repository root: %s", repo_root)
    return ContribContext(
        git=git,
        github=RealGitHub(runner),
        console=RealConsole(),
        cwd=cwd,
        repo_root=repo_root,
        config=config,
    )
