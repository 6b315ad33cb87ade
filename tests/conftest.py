"""Pytest fixtures for autorelease tests.

Provides common fixtures for:
- Temporary project directories
- Git repository setup
- A file tree for glob expansion
- In-memory fakes for the release host and the notifier
"""

import os
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest

from autorelease.commits import CommitRecord
from autorelease.exceptions import NotificationError
from autorelease.publishers.base import (
    Notifier,
    ReleaseHandle,
    ReleaseHost,
    ReleaseRequest,
    UploadedAsset,
)
from autorelease.publishers.github import guess_content_type

HEAD_SHA = "0123456789abcdef0123456789abcdef01234567"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove action inputs and runner variables during a test.

    Tests may run inside GitHub Actions themselves; their INPUT_* and
    GITHUB_* variables must not leak into settings or outputs.
    """
    for key in list(os.environ.keys()):
        if key.startswith(("INPUT_", "GITHUB_")):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def temp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Yields:
        Path to temporary directory
    """
    yield tmp_path


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """Create a temporary project directory.

    Returns:
        Path to project directory
    """
    project = temp_dir / "test-project"
    project.mkdir()
    return project


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


@pytest.fixture
def git_repo(project_dir: Path) -> Path:
    """Create a git repository on branch 'main' in the project directory.

    Returns:
        Path to git repository
    """
    _git(project_dir, "init")
    _git(project_dir, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(project_dir, "config", "user.email", "test@test.com")
    _git(project_dir, "config", "user.name", "Test User")
    _git(project_dir, "config", "commit.gpgsign", "false")
    return project_dir


@pytest.fixture
def committed_repo(git_repo: Path) -> Path:
    """Git repository with one commit and a clean working tree.

    Returns:
        Path to git repository
    """
    (git_repo / "README.md").write_text("# test project\n")
    (git_repo / ".gitignore").write_text("dist/\n")
    _git(git_repo, "add", ".")
    _git(git_repo, "commit", "-m", "feat: initial commit")
    return git_repo


@pytest.fixture
def asset_tree(temp_dir: Path) -> Path:
    """Create a small file tree for glob expansion.

    Layout:
        a.txt
        b.log
        v1.0+build.txt
        a/z.txt
        a/b/z.txt
        a/b/c/z.txt
        dist/app.whl
        dist/app.tar.gz
        dist/sub/deep.whl

    Returns:
        Root of the tree
    """
    root = temp_dir / "tree"
    files = [
        "a.txt",
        "b.log",
        "v1.0+build.txt",
        "a/z.txt",
        "a/b/z.txt",
        "a/b/c/z.txt",
        "dist/app.whl",
        "dist/app.tar.gz",
        "dist/sub/deep.whl",
    ]
    for name in files:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(name)
    return root


class FakeHost(ReleaseHost):
    """In-memory ReleaseHost recording every write."""

    def __init__(
        self,
        latest_tag: str | None = None,
        commits: list[CommitRecord] | None = None,
    ) -> None:
        self.latest_tag = latest_tag
        self.commits = commits or []
        self.tags: list[tuple[str, str]] = []
        self.commit_queries: list[tuple[str | None, str]] = []
        self.releases: list[ReleaseRequest] = []
        self.uploads: list[Path] = []
        self.deleted_releases: list[int] = []
        self.deleted_tags: list[str] = []

    def get_latest_release_tag(self) -> str | None:
        return self.latest_tag

    def create_tag_ref(self, tag_name: str, sha: str) -> None:
        self.tags.append((tag_name, sha))

    def get_commits_since(self, base: str | None, head: str) -> list[CommitRecord]:
        self.commit_queries.append((base, head))
        return list(self.commits)

    def create_release(self, request: ReleaseRequest) -> ReleaseHandle:
        self.releases.append(request)
        return ReleaseHandle(
            id=len(self.releases),
            upload_url="https://uploads.example.com/assets{?name,label}",
            html_url=f"https://github.com/o/r/releases/tag/{request.tag_name}",
            tag_name=request.tag_name,
        )

    def upload_release_asset(self, release: ReleaseHandle, path: Path) -> UploadedAsset:
        self.uploads.append(path)
        return UploadedAsset(
            name=path.name,
            size=path.stat().st_size,
            content_type=guess_content_type(path.name),
        )

    def get_release_by_tag(self, tag_name: str) -> ReleaseHandle | None:
        for index, request in enumerate(self.releases, start=1):
            if request.tag_name == tag_name:
                return ReleaseHandle(id=index, upload_url="", tag_name=tag_name)
        return None

    def delete_release(self, release_id: int) -> None:
        self.deleted_releases.append(release_id)

    def delete_tag_ref(self, tag_name: str) -> None:
        self.deleted_tags.append(tag_name)

    @property
    def writes(self) -> int:
        return len(self.tags) + len(self.releases) + len(self.uploads)


class FakeNotifier(Notifier):
    """Notifier collecting messages, optionally failing every delivery."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        if self.fail:
            raise NotificationError("Webhook rejected the notification with HTTP 500")
        self.messages.append(message)


@pytest.fixture
def fake_host() -> FakeHost:
    """Release host with no previous release and one commit."""
    return FakeHost(
        commits=[
            CommitRecord(
                sha="abcdef1234567890abcdef1234567890abcdef12",
                message="fix: crash",
                author_name="Alice",
                author_login="alice",
            )
        ]
    )


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()
