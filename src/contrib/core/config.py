"""Loading and validation of ``.contributerc.json``.

Example config:
  {
    "workflow": "clean-flow",
    "role": "contributor",
    "mainBranch": "main",
    "devBranch": "dev",
    "upstream": "upstream",
    "origin": "origin",
    "branchPrefixes": ["feature", "fix", "docs", "chore", "test", "refactor"],
    "commitConvention": "clean-commit"
  }

The file is only read here. Writing it belongs to interactive setup, which is
not part of this package.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, cast

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".contributerc.json"

WorkflowMode = Literal["clean-flow", "github-flow", "git-flow"]
Role = Literal["maintainer", "contributor"]
CommitConvention = Literal["conventional", "clean-commit", "none"]

VALID_WORKFLOWS: tuple[WorkflowMode, ...] = ("clean-flow", "github-flow", "git-flow")
VALID_ROLES: tuple[Role, ...] = ("maintainer", "contributor")
VALID_CONVENTIONS: tuple[CommitConvention, ...] = ("conventional", "clean-commit", "none")

DEFAULT_DEV_BRANCH = "dev"

_REQUIRED_STRING_FIELDS = (
    "workflow",
    "role",
    "mainBranch",
    "upstream",
    "origin",
    "commitConvention",
)


@dataclass(frozen=True)
class WorkflowConfig:
    """Branching model and remotes for one repository.

    ``dev_branch`` is set exactly when the workflow has a dev branch
    (clean-flow, git-flow) and None for github-flow.
    """

    workflow: WorkflowMode
    role: Role
    main_branch: str
    dev_branch: str | None
    origin: str
    upstream: str
    branch_prefixes: tuple[str, ...]
    commit_convention: CommitConvention


@dataclass(frozen=True)
class ConfigNotFound:
    """No configuration file at the repository root."""

    path: Path

    @property
    def error_type(self) -> str:
        return "config-not-found"

    @property
    def message(self) -> str:
        return f"No {CONFIG_FILENAME} found at {self.path.parent}. Run setup to create one."


@dataclass(frozen=True)
class ConfigInvalid:
    """The configuration file exists but cannot be used."""

    path: Path
    reason: str

    @property
    def error_type(self) -> str:
        return "config-invalid"

    @property
    def message(self) -> str:
        return f"Invalid {CONFIG_FILENAME}: {self.reason}"


def get_config_path(repo_root: Path) -> Path:
    return repo_root / CONFIG_FILENAME


def default_workflow_config() -> WorkflowConfig:
    """Configuration proposed to new repositories."""
    return WorkflowConfig(
        workflow="clean-flow",
        role="contributor",
        main_branch="main",
        dev_branch=DEFAULT_DEV_BRANCH,
        origin="origin",
        upstream="upstream",
        branch_prefixes=("feature", "fix", "docs", "chore", "test", "refactor"),
        commit_convention="clean-commit",
    )


def has_dev_branch(workflow: WorkflowMode) -> bool:
    """Whether the workflow uses a separate dev/develop branch."""
    return workflow in ("clean-flow", "git-flow")


def load_workflow_config(repo_root: Path) -> WorkflowConfig | ConfigNotFound | ConfigInvalid:
    """Load and validate ``.contributerc.json`` from ``repo_root``.

    Returns:
        WorkflowConfig, ConfigNotFound when the file is absent, or ConfigInvalid
        naming the first problem found
    """
    path = get_config_path(repo_root)
    if not path.exists():
        return ConfigNotFound(path=path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        return ConfigInvalid(path=path, reason=f"not valid JSON ({e.msg} at line {e.lineno})")

    result = parse_workflow_config(data)
    if isinstance(result, str):
        return ConfigInvalid(path=path, reason=result)
    logger.debug("Loaded %s: %s", path, result)
    return result


def parse_workflow_config(data: Any) -> WorkflowConfig | str:
    """Validate decoded JSON into a WorkflowConfig.

    Returns:
        WorkflowConfig, or a description of the first validation failure
    """
    if not isinstance(data, dict):
        return "top-level value must be an object"

    for field in _REQUIRED_STRING_FIELDS:
        if not isinstance(data.get(field), str):
            return f"{field} must be a string"
    if not isinstance(data.get("branchPrefixes"), list):
        return "branchPrefixes must be a list"

    workflow = data["workflow"]
    if workflow not in VALID_WORKFLOWS:
        return f'invalid workflow "{workflow}". Valid: {", ".join(VALID_WORKFLOWS)}'
    role = data["role"]
    if role not in VALID_ROLES:
        return f'invalid role "{role}". Valid: {", ".join(VALID_ROLES)}'
    convention = data["commitConvention"]
    if convention not in VALID_CONVENTIONS:
        return f'invalid commitConvention "{convention}". Valid: {", ".join(VALID_CONVENTIONS)}'

    if not data["mainBranch"].strip():
        return "mainBranch must not be empty"
    if not data["origin"].strip():
        return "origin must not be empty"
    if role == "contributor" and not data["upstream"].strip():
        return "upstream must not be empty for contributors"

    prefixes = data["branchPrefixes"]
    if not prefixes:
        return "branchPrefixes must not be empty"
    if not all(isinstance(p, str) and p.strip() for p in prefixes):
        return "all branchPrefixes must be non-empty strings"

    dev_branch: str | None = None
    if has_dev_branch(workflow):
        raw_dev = data.get("devBranch")
        if raw_dev is not None and not isinstance(raw_dev, str):
            return "devBranch must be a string"
        dev_branch = raw_dev.strip() if raw_dev and raw_dev.strip() else DEFAULT_DEV_BRANCH

    return WorkflowConfig(
        workflow=cast(WorkflowMode, workflow),
        role=cast(Role, role),
        main_branch=data["mainBranch"].strip(),
        dev_branch=dev_branch,
        origin=data["origin"].strip(),
        upstream=data["upstream"].strip(),
        branch_prefixes=tuple(p.strip() for p in prefixes),
        commit_convention=cast(CommitConvention, convention),
    )
