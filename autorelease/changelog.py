"""Release notes built from the commits since the last release."""

from dataclasses import dataclass, field

from autorelease.commits import CommitRecord
from autorelease.exceptions import SummaryError
from autorelease.summary import ChangelogSummarizer
from autorelease.utils.actions import report_warning

SUMMARY_HEADING = "## Changelog Summary"
CHANGES_HEADING = "## What's Changed"


def format_commit_line(commit: CommitRecord) -> str:
    """Format one commit as a markdown bullet.

    Example:
        '- fix: crash (abcdef1) by @alice'
    """
    return f"- {commit.title} ({commit.short_sha}) by @{commit.author}"


@dataclass
class ChangelogDocument:
    """Bullet list of changes with an optional prose summary."""

    lines: list[str] = field(default_factory=list)
    summary: str = ""

    @property
    def bullets(self) -> str:
        return "\n".join(self.lines)

    def render(self) -> str:
        """Markdown release body."""
        changes = f"{CHANGES_HEADING}\n\n{self.bullets}"
        if not self.summary:
            return changes
        return f"{SUMMARY_HEADING}\n\n{self.summary}\n\n{changes}"


def build_changelog(
    commits: list[CommitRecord],
    summarizer: ChangelogSummarizer | None = None,
) -> ChangelogDocument:
    """Build the changelog, asking the summarizer for a summary if given.

    A failing summary never fails the build: the summary is left empty
    and a warning is reported.
    """
    document = ChangelogDocument(lines=[format_commit_line(c) for c in commits])
    if summarizer is None:
        return document

    try:
        document.summary = summarizer.summarize(document.bullets)
    except SummaryError as e:
        report_warning(f"Changelog summary skipped: {e}")
        document.summary = ""
    return document
