"""Git queries used to validate the local checkout before a release.

Tags are created through the GitHub API, never by local git commands,
so only read-only operations live here.
"""

from autorelease.git.queries import (
    get_commit_message,
    get_commit_sha,
    get_current_branch,
    get_uncommitted_files,
    is_clean,
)

__all__ = [
    "is_clean",
    "get_uncommitted_files",
    "get_current_branch",
    "get_commit_sha",
    "get_commit_message",
]
