"""GitHub REST API client.

Implements ReleaseHost on top of urllib.request:
- Latest release lookup (404 means "no release yet")
- Tag reference creation and deletion
- Commit listing and comparison, following Link pagination
- Release creation, lookup and deletion
- Release asset upload through the release's upload URL
"""

import http.client
import json
import mimetypes
import re
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Any

from autorelease import __version__
from autorelease.commits import CommitRecord
from autorelease.exceptions import AssetError, HostApiError
from autorelease.publishers.base import (
    ReleaseHandle,
    ReleaseHost,
    ReleaseRequest,
    UploadedAsset,
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

USER_AGENT = f"autorelease/{__version__}"

PER_PAGE = 100

LINK_NEXT_PATTERN = re.compile(r'<([^>]+)>;\s*rel="next"')


def guess_content_type(name: str) -> str:
    """Content type for an asset file name, octet-stream when unknown."""
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


def next_page_url(link_header: str | None) -> str | None:
    """Extract the rel="next" URL from a Link response header."""
    if not link_header:
        return None
    match = LINK_NEXT_PATTERN.search(link_header)
    return match.group(1) if match else None


def expand_upload_url(upload_url: str, name: str) -> str:
    """Turn an upload URL template into the URL for one asset.

    Example:
        'https://uploads.github.com/repos/o/r/releases/1/assets{?name,label}'
        -> 'https://uploads.github.com/repos/o/r/releases/1/assets?name=app.zip'
    """
    base_url = upload_url.split("{", 1)[0]
    return f"{base_url}?name={urllib.parse.quote(name)}"


class GitHubClient(ReleaseHost):
    """ReleaseHost backed by the GitHub REST API."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        api_url: str = "https://api.github.com",
        timeout: int = 60,
    ) -> None:
        self.token = token
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": USER_AGENT,
        }

    def request(
        self,
        method: str,
        url: str,
        data: dict[str, Any] | None = None,
        raw_data: bytes | None = None,
        content_type: str = "application/json",
        timeout: int | None = None,
    ) -> tuple[Any, dict[str, str]]:
        """Perform one API call.

        Args:
            method: HTTP method
            url: Absolute URL or path below the API root
            data: JSON body
            raw_data: Binary body (takes precedence over data)
            content_type: Content type of raw_data
            timeout: Socket timeout override

        Returns:
            Tuple of (parsed JSON body or None, response headers)

        Raises:
            HostApiError: On HTTP errors and connection failures
        """
        if not url.startswith("http"):
            url = f"{self.api_url}{url}"
        headers = self._headers()

        body = None
        if raw_data is not None:
            body = raw_data
            headers["Content-Type"] = content_type
            headers["Content-Length"] = str(len(raw_data))
        elif data is not None:
            body = json.dumps(data).encode("utf-8")
            headers["Content-Type"] = "application/json"

        try:
            req = urllib.request.Request(url, data=body, headers=headers, method=method)
            with urllib.request.urlopen(req, timeout=timeout or self.timeout) as resp:
                payload = resp.read()
                response_headers = {k.lower(): v for k, v in resp.headers.items()}
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            raise HostApiError(
                f"GitHub API {method} {urllib.parse.urlsplit(url).path} failed with HTTP {e.code}",
                status=e.code,
                details=error_body[:500] or e.reason,
            ) from e
        except urllib.error.URLError as e:
            raise HostApiError(
                f"GitHub API {method} {url} could not be reached",
                details=str(e.reason),
                fix_hint="Check network connectivity and GITHUB_API_URL",
            ) from e
        except TimeoutError as e:
            raise HostApiError(f"GitHub API {method} {url} timed out") from e
        except ValueError as e:
            raise HostApiError(
                f"Invalid GitHub API URL: {url}",
                details=str(e),
                fix_hint="GITHUB_API_URL must be an absolute http(s) URL",
            ) from e
        except (OSError, http.client.HTTPException) as e:
            raise HostApiError(
                f"GitHub API {method} {url} connection failed",
                details=f"{type(e).__name__}: {e}",
            ) from e

        if not payload:
            return None, response_headers
        try:
            return json.loads(payload), response_headers
        except json.JSONDecodeError as e:
            raise HostApiError(
                f"GitHub API {method} {url} returned invalid JSON",
                details=str(e),
            ) from e

    def paginate(self, path: str, key: str | None = None) -> list[Any]:
        """Collect every item of a paginated listing.

        Args:
            path: API path including query string
            key: Name of the list inside an object response (e.g. 'commits')
        """
        items: list[Any] = []
        separator = "&" if "?" in path else "?"
        url: str | None = f"{path}{separator}per_page={PER_PAGE}"
        while url:
            data, headers = self.request("GET", url)
            page = (data or {}).get(key, []) if key else (data or [])
            items.extend(page)
            url = next_page_url(headers.get("link"))
        return items

    def get_latest_release_tag(self) -> str | None:
        try:
            data, _ = self.request("GET", f"{self.repo_path}/releases/latest")
        except HostApiError as e:
            if e.status == 404:
                return None
            raise
        return (data or {}).get("tag_name") or None

    def create_tag_ref(self, tag_name: str, sha: str) -> None:
        self.request(
            "POST",
            f"{self.repo_path}/git/refs",
            data={"ref": f"refs/tags/{tag_name}", "sha": sha},
        )

    def delete_tag_ref(self, tag_name: str) -> None:
        self.request(
            "DELETE",
            f"{self.repo_path}/git/refs/tags/{urllib.parse.quote(tag_name)}",
        )

    def get_commits_since(self, base: str | None, head: str) -> list[CommitRecord]:
        if base:
            basehead = urllib.parse.quote(f"{base}...{head}", safe=".")
            raw = self.paginate(f"{self.repo_path}/compare/{basehead}", key="commits")
        else:
            raw = self.paginate(
                f"{self.repo_path}/commits?sha={urllib.parse.quote(head)}"
            )
        return [CommitRecord.from_api(item) for item in raw]

    def create_release(self, request: ReleaseRequest) -> ReleaseHandle:
        data, _ = self.request(
            "POST",
            f"{self.repo_path}/releases",
            data={
                "tag_name": request.tag_name,
                "name": request.name,
                "body": request.body,
                "draft": request.draft,
                "prerelease": request.prerelease,
            },
        )
        return self._to_handle(data or {})

    def get_release_by_tag(self, tag_name: str) -> ReleaseHandle | None:
        try:
            data, _ = self.request(
                "GET",
                f"{self.repo_path}/releases/tags/{urllib.parse.quote(tag_name)}",
            )
        except HostApiError as e:
            if e.status == 404:
                return None
            raise
        return self._to_handle(data or {})

    def delete_release(self, release_id: int) -> None:
        self.request("DELETE", f"{self.repo_path}/releases/{release_id}")

    def upload_release_asset(self, release: ReleaseHandle, path: Path) -> UploadedAsset:
        try:
            file_data = path.read_bytes()
        except OSError as e:
            raise AssetError(f"Failed to read asset {path}", details=str(e)) from e

        name = path.name
        content_type = guess_content_type(name)
        data, _ = self.request(
            "POST",
            expand_upload_url(release.upload_url, name),
            raw_data=file_data,
            content_type=content_type,
            timeout=max(self.timeout, 300),
        )
        data = data or {}
        return UploadedAsset(
            name=data.get("name", name),
            size=data.get("size", len(file_data)),
            content_type=content_type,
            download_url=data.get("browser_download_url", ""),
        )

    @staticmethod
    def _to_handle(data: dict[str, Any]) -> ReleaseHandle:
        return ReleaseHandle(
            id=int(data.get("id", 0)),
            upload_url=data.get("upload_url", ""),
            html_url=data.get("html_url", ""),
            tag_name=data.get("tag_name", ""),
        )
