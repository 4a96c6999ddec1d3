"""Branch naming rules for new feature branches."""

import re

DEFAULT_PREFIXES = ("feature", "fix", "docs", "chore", "test", "refactor")

# Special refs git would resolve before any branch of the same name
RESERVED_GIT_NAMES = frozenset(
    {
        "HEAD",
        "FETCH_HEAD",
        "ORIG_HEAD",
        "MERGE_HEAD",
        "CHERRY_PICK_HEAD",
        "REBASE_HEAD",
        "BISECT_HEAD",
    }
)

_FORBIDDEN_CHARS = re.compile(r"[\x00-\x1f\x7f ~^:?*\[\]\\]")
_ALLOWED_CHARS = re.compile(r"^[a-zA-Z0-9._/-]+$")


def parse_prefix(branch_name: str, prefixes: tuple[str, ...] = DEFAULT_PREFIXES) -> str | None:
    for prefix in prefixes:
        if branch_name.startswith(f"{prefix}/"):
            return prefix
    return None


def format_branch_name(prefix: str, name: str) -> str:
    """Build ``prefix/kebab-case-name`` from free text.

    Example:
        >>> format_branch_name("fix", "Login Timeout!")
        'fix/login-timeout'
    """
    sanitized = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return f"{prefix}/{sanitized}"


def is_valid_branch_name(name: str) -> bool:
    """Stricter than ``git check-ref-format``: also limits the character set.

    Names that git would read as an option, a revision range or reflog
    syntax are rejected, as are reserved refs.
    """
    if not name or name in RESERVED_GIT_NAMES:
        return False
    if name.startswith("-"):
        return False
    if ".." in name or "@{" in name:
        return False
    if _FORBIDDEN_CHARS.search(name):
        return False
    if "/." in name or name.endswith(".lock") or name.endswith("."):
        return False
    if not _ALLOWED_CHARS.match(name):
        return False
    if name.startswith("/") or name.endswith("/") or "//" in name:
        return False
    return True


def looks_like_natural_language(text: str) -> bool:
    """Spaces and no slash: a description rather than a formatted branch name."""
    return " " in text and "/" not in text
