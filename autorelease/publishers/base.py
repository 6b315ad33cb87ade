"""Interfaces of the external services a release run talks to.

- ReleaseHost: the repository host (tags, releases, commits, assets)
- Notifier: a chat webhook announcing the release

The workflow depends only on these interfaces; tests substitute fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from autorelease.commits import CommitRecord


@dataclass(frozen=True)
class ReleaseRequest:
    """Parameters of a release to create.

    Attributes:
        tag_name: Existing tag the release is attached to
        name: Release title
        body: Release notes (markdown)
        draft: Create as an unpublished draft
        prerelease: Mark as a prerelease
    """

    tag_name: str
    name: str
    body: str
    draft: bool = False
    prerelease: bool = False


@dataclass(frozen=True)
class ReleaseHandle:
    """A created release.

    Attributes:
        id: Host release identifier
        upload_url: Asset upload endpoint (may be a URI template)
        html_url: Web page of the release
        tag_name: Tag the release points at
    """

    id: int
    upload_url: str
    html_url: str = ""
    tag_name: str = ""


@dataclass(frozen=True)
class UploadedAsset:
    """An asset attached to a release."""

    name: str
    size: int
    content_type: str
    download_url: str = ""


class ReleaseHost(ABC):
    """Repository host operations needed by the release workflow."""

    @abstractmethod
    def get_latest_release_tag(self) -> str | None:
        """Tag of the latest published release, None if there is none yet."""

    @abstractmethod
    def create_tag_ref(self, tag_name: str, sha: str) -> None:
        """Create refs/tags/<tag_name> pointing at sha."""

    @abstractmethod
    def get_commits_since(self, base: str | None, head: str) -> list[CommitRecord]:
        """Commits in base...head, or every commit reachable from head when base is None."""

    @abstractmethod
    def create_release(self, request: ReleaseRequest) -> ReleaseHandle:
        """Create a release record."""

    @abstractmethod
    def upload_release_asset(self, release: ReleaseHandle, path: Path) -> UploadedAsset:
        """Attach a file to a release."""

    @abstractmethod
    def get_release_by_tag(self, tag_name: str) -> ReleaseHandle | None:
        """Look up the release attached to a tag."""

    @abstractmethod
    def delete_release(self, release_id: int) -> None:
        """Delete a release record (the tag is kept)."""

    @abstractmethod
    def delete_tag_ref(self, tag_name: str) -> None:
        """Delete refs/tags/<tag_name>."""


class Notifier(ABC):
    """Destination for release announcements."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Deliver a plain-text message.

        Raises:
            NotificationError: If the message could not be delivered
        """
