"""Custom exception hierarchy for autorelease.

Exit codes follow Unix conventions:
- 1: General error
- 2: Configuration error
- 3: Precondition error
- 4: Git error
- 5: Version error
- 6: Host API error
- 7: Command error
- 8: Asset error

SummaryError and NotificationError never reach the CLI; they are
downgraded to warnings where they are raised.
"""


class ReleaseError(Exception):
    """Base exception for all release errors.

    Each subclass defines an exit_code for CLI error reporting.
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Brief error message
            details: Detailed explanation of what went wrong
            fix_hint: Suggested command or action to fix the issue
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"\nDetails: {self.details}")
        if self.fix_hint:
            parts.append(f"\nFix: {self.fix_hint}")
        return "".join(parts)


class ConfigurationError(ReleaseError):
    """Configuration and trigger errors.

    Raised when:
    - The commit message contains '!release' without a valid kind
    - No release type is supplied to the version bumper
    - Required inputs (GITHUB_TOKEN, GITHUB_REPOSITORY) are missing
    - A config file is missing or has invalid syntax
    """

    exit_code = 2


class PreconditionError(ReleaseError):
    """Repository state does not allow a release.

    Raised when:
    - The working tree has uncommitted changes
    - The current branch is not the allowed release branch
    """

    exit_code = 3


class GitError(ReleaseError):
    """The git binary failed or could not be run."""

    exit_code = 4


class VersionError(ReleaseError):
    """The previous release tag is not a valid semantic version."""

    exit_code = 5


class HostApiError(ReleaseError):
    """A GitHub REST API call failed.

    Attributes:
        status: HTTP status code, or 0 when no response was received
    """

    exit_code = 6

    def __init__(
        self,
        message: str,
        status: int = 0,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        super().__init__(message, details=details, fix_hint=fix_hint)
        self.status = status


class CommandError(ReleaseError):
    """A configured lint/test or build command exited with non-zero status."""

    exit_code = 7


class AssetError(ReleaseError):
    """Asset files could not be resolved or read."""

    exit_code = 8


class SummaryError(ReleaseError):
    """The language model summary could not be produced."""


class NotificationError(ReleaseError):
    """The webhook notification could not be delivered."""
