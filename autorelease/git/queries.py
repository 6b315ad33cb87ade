"""Read-only git state queries.

All functions use autorelease.utils.shell.capture() for command execution
and raise GitError when git itself fails.
"""

import re
import subprocess
from pathlib import Path

from autorelease.exceptions import GitError
from autorelease.utils.shell import ShellError, capture


def _git(args: list[str], cwd: Path | None, what: str) -> str:
    try:
        return capture(["git", *args], cwd=cwd)
    except (ShellError, OSError, subprocess.TimeoutExpired) as e:
        raise GitError(
            f"Failed to {what}",
            details=str(e),
            fix_hint="Ensure you are in a git repository and git is installed",
        ) from e


def get_uncommitted_files(cwd: Path | None = None) -> list[str]:
    """Get the files with uncommitted changes, untracked files included.

    Args:
        cwd: Working directory (defaults to current directory)

    Returns:
        File paths as reported by 'git status --porcelain'

    Raises:
        GitError: If git command fails
    """
    output = _git(["status", "--porcelain"], cwd, "check git working tree status")
    files = []
    for line in output.splitlines():
        # Format: "XY filename" where XY is the status code
        parts = line.strip().split(maxsplit=1)
        if len(parts) == 2:
            files.append(parts[1])
    return files


def is_clean(cwd: Path | None = None) -> bool:
    """Check if the working tree has no pending modifications.

    Raises:
        GitError: If git status command fails
    """
    output = _git(["status", "--porcelain"], cwd, "check git working tree status")
    return not output.strip()


def get_current_branch(cwd: Path | None = None) -> str:
    """Get the name of the current git branch.

    Falls back to 'git rev-parse --abbrev-ref HEAD' when 'git branch
    --show-current' prints nothing (detached HEAD), which yields "HEAD".

    Raises:
        GitError: If unable to determine current branch
    """
    branch = _git(["branch", "--show-current"], cwd, "get current branch name").strip()
    if not branch:
        branch = _git(
            ["rev-parse", "--abbrev-ref", "HEAD"], cwd, "get current branch name"
        ).strip()
    return branch


def get_commit_sha(ref: str = "HEAD", cwd: Path | None = None) -> str:
    """Get the full SHA of a commit reference.

    Raises:
        GitError: If the reference cannot be resolved
    """
    sha = _git(["rev-parse", ref], cwd, f"resolve git reference '{ref}'").strip()
    if not re.match(r"^[0-9a-f]{40}$", sha):
        raise GitError(
            f"Invalid commit SHA format: {sha}",
            details=f"Expected 40 hex characters for ref '{ref}'",
            fix_hint="Ensure the git reference exists and is valid",
        )
    return sha


def get_commit_message(ref: str = "HEAD", cwd: Path | None = None) -> str:
    """Get the full message of a commit.

    Raises:
        GitError: If the reference cannot be resolved
    """
    return _git(
        ["log", "-1", "--format=%B", ref], cwd, f"read commit message of '{ref}'"
    ).strip()
