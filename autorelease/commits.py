"""Commit records, release triggers and conventional-commit checks.

A release is requested by putting `!release: <kind>` anywhere in the
head commit message, where kind is major, minor or patch (any case).
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from autorelease.utils.version import BumpType

TRIGGER_MARKER = "!release"

TRIGGER_PATTERN = re.compile(r"!release:\s*(major|minor|patch)", re.IGNORECASE)

CONVENTIONAL_PATTERN = re.compile(
    r"^(feat|fix|docs|chore|refactor|style|perf)(\(.+\))?:"
)


@dataclass(frozen=True)
class CommitRecord:
    """A commit as returned by the repository host.

    Attributes:
        sha: Full commit SHA
        message: Full commit message
        author_name: Git author name
        author_login: Host account login of the author, when linked
    """

    sha: str
    message: str
    author_name: str = ""
    author_login: str | None = None

    @property
    def title(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0]

    @property
    def body(self) -> str:
        """Message after the first line."""
        parts = self.message.split("\n", 1)
        return parts[1].strip() if len(parts) > 1 else ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def author(self) -> str:
        """Login when available, otherwise the raw author name."""
        return self.author_login or self.author_name

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommitRecord":
        """Build a record from a GitHub commit object."""
        commit = data.get("commit") or {}
        git_author = commit.get("author") or {}
        account = data.get("author") or {}
        return cls(
            sha=data.get("sha", ""),
            message=commit.get("message", ""),
            author_name=git_author.get("name", ""),
            author_login=account.get("login") or None,
        )


class CommitCompliance(Enum):
    """Result of checking a message against the conventional grammar."""

    COMPLIANT = "compliant"
    NON_COMPLIANT = "non-compliant"


def parse_release_trigger(message: str) -> BumpType | None:
    """Extract the requested release type from a commit message.

    Examples:
        >>> parse_release_trigger('fix: bug !release: patch')
        'patch'
        >>> parse_release_trigger('normal commit') is None
        True
    """
    match = TRIGGER_PATTERN.search(message or "")
    if not match:
        return None
    return match.group(1).lower()  # type: ignore[return-value]


def has_trigger_marker(message: str) -> bool:
    """Check for the bare '!release' marker, valid or not."""
    return TRIGGER_MARKER in (message or "")


def classify_conventional(message: str) -> CommitCompliance:
    """Classify the first line of a commit message."""
    title = (message or "").split("\n", 1)[0]
    if CONVENTIONAL_PATTERN.match(title):
        return CommitCompliance.COMPLIANT
    return CommitCompliance.NON_COMPLIANT


def find_nonconventional(commits: list[CommitRecord]) -> list[CommitRecord]:
    """Return the commits whose messages are not conventional."""
    return [
        c
        for c in commits
        if classify_conventional(c.message) is CommitCompliance.NON_COMPLIANT
    ]
