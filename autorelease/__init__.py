"""Commit-triggered release automation for GitHub repositories."""

__version__ = "0.1.0"

from autorelease.exceptions import (
    AssetError,
    CommandError,
    ConfigurationError,
    GitError,
    HostApiError,
    NotificationError,
    PreconditionError,
    ReleaseError,
    SummaryError,
    VersionError,
)

__all__ = [
    "__version__",
    "ReleaseError",
    "ConfigurationError",
    "PreconditionError",
    "GitError",
    "VersionError",
    "HostApiError",
    "CommandError",
    "AssetError",
    "SummaryError",
    "NotificationError",
]
