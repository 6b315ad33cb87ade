"""Clients for the repository host and the release notification webhook."""

from autorelease.publishers.base import (
    Notifier,
    ReleaseHandle,
    ReleaseHost,
    ReleaseRequest,
    UploadedAsset,
)
from autorelease.publishers.discord import DiscordNotifier
from autorelease.publishers.github import GitHubClient

__all__ = [
    "Notifier",
    "ReleaseHandle",
    "ReleaseHost",
    "ReleaseRequest",
    "UploadedAsset",
    "DiscordNotifier",
    "GitHubClient",
]
