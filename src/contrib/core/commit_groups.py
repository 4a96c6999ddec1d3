"""Validation of AI-proposed file-to-commit groupings.

The grouping service is untrusted: it may invent files, leave groups empty or
wrap its JSON in prose. Everything it returns passes through here before any
file is staged.
"""

import json
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class CommitGroup:
    files: tuple[str, ...]
    message: str


@dataclass(frozen=True)
class NoUsableCommitGroups:
    """Validation removed every group."""

    @property
    def error_type(self) -> str:
        return "no-usable-commit-groups"

    @property
    def message(self) -> str:
        return "AI returned no usable groups. Commit manually or try again."


@dataclass(frozen=True)
class CommitGroupParseError:
    """The grouping response is not a JSON array of {files, message} objects."""

    reason: str
    raw_start: str

    @property
    def error_type(self) -> str:
        return "commit-group-parse-error"

    @property
    def message(self) -> str:
        return f"{self.reason}. Raw start: {self.raw_start!r}"


_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


def extract_json(raw: str) -> str:
    """Strip markdown fences and surrounding prose from a JSON reply."""
    text = _FENCE_END.sub("", _FENCE_START.sub("", raw.strip())).strip()
    if text.startswith("[") or text.startswith("{"):
        return text

    openings = ((text.find("["), "]"), (text.find("{"), "}"))
    starts = [(idx, close) for idx, close in openings if idx != -1]
    if not starts:
        return text
    start, close = min(starts)
    end = text.rfind(close)
    if end <= start:
        return text[start:]
    return text[start : end + 1]


def parse_commit_groups(raw: str) -> list[CommitGroup] | CommitGroupParseError:
    """Decode the grouping service's reply into CommitGroups.

    Structure only: files are not checked against the working tree here.
    """
    raw_start = raw.strip()[:120]
    try:
        parsed = json.loads(extract_json(raw))
    except json.JSONDecodeError:
        return CommitGroupParseError(reason="AI response is not valid JSON", raw_start=raw_start)

    if not isinstance(parsed, list) or not parsed:
        return CommitGroupParseError(
            reason="AI response was not a JSON array of commit groups", raw_start=raw_start
        )

    groups: list[CommitGroup] = []
    for entry in parsed:
        if (
            not isinstance(entry, dict)
            or not isinstance(entry.get("files"), list)
            or not isinstance(entry.get("message"), str)
        ):
            return CommitGroupParseError(
                reason="AI returned groups with missing files or message", raw_start=raw_start
            )
        files = tuple(f for f in entry["files"] if isinstance(f, str))
        groups.append(CommitGroup(files=files, message=entry["message"]))
    return groups


def validate_commit_groups(
    groups: list[CommitGroup], changed_files: list[str]
) -> list[CommitGroup]:
    """Drop files that are not actually changed, then drop empty groups.

    A file claimed by several groups stays in the first one only. Never
    raises. Files changed but absent from every group are not added back;
    see find_ungrouped_files.
    """
    changed = set(changed_files)
    seen: set[str] = set()
    valid: list[CommitGroup] = []
    for group in groups:
        files: list[str] = []
        for path in group.files:
            if path in changed and path not in seen:
                seen.add(path)
                files.append(path)
        if files:
            valid.append(CommitGroup(files=tuple(files), message=group.message))
    return valid


def ensure_usable_groups(groups: list[CommitGroup]) -> list[CommitGroup] | NoUsableCommitGroups:
    if not groups:
        return NoUsableCommitGroups()
    return groups


def find_ungrouped_files(groups: list[CommitGroup], changed_files: list[str]) -> list[str]:
    """Changed files that no group claims, in working-tree order."""
    grouped = {f for group in groups for f in group.files}
    return [f for f in changed_files if f not in grouped]
