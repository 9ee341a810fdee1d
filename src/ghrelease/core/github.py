"""GitHub API client for release, tag and asset endpoints."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

import httpx

from ghrelease import __version__
from ghrelease.core.config import Settings
from ghrelease.core.errors import APIError, TransportError, ValidationError
from ghrelease.models.release import LightweightTag, Release, Tag

logger = logging.getLogger(__name__)

PER_PAGE = 100


def _error_details(errors: list) -> list[str]:
    """Flatten the ``errors`` list of a GitHub error envelope."""
    details = []
    for error in errors:
        if isinstance(error, str):
            details.append(error)
        elif error.get("message"):
            details.append(error["message"])
        else:
            parts = [error.get("resource"), error.get("field"), error.get("code")]
            details.append(" ".join(p for p in parts if p))
    return details


def check_response(response: httpx.Response) -> None:
    """Raise APIError unless the response has a 2xx status."""
    if response.is_success:
        return

    # Streaming responses have not been read yet
    response.read()

    message = response.reason_phrase or "request failed"
    errors: list[str] = []
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message") or message
        errors = _error_details(payload.get("errors") or [])

    reset_at = None
    if (
        response.status_code in (403, 429)
        and response.headers.get("x-ratelimit-remaining") == "0"
    ):
        reset = response.headers.get("x-ratelimit-reset")
        if reset and reset.isdigit():
            reset_at = datetime.fromtimestamp(int(reset), tz=timezone.utc)
            message = f"API rate limit exceeded, resets at {reset_at:%Y-%m-%d %H:%M:%S} UTC"
        else:
            message = "API rate limit exceeded"

    raise APIError(response.status_code, message, errors, rate_limit_reset=reset_at)


class GitHubClient:
    """Client for interacting with GitHub API."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.settings = settings
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"github-release/{__version__}",
        }
        if settings.token:
            headers["Authorization"] = f"token {settings.token}"
        self.client = httpx.Client(
            base_url=settings.api_url,
            headers=headers,
            timeout=settings.timeout,
            transport=transport or settings.transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self) -> None:
        self.client.close()

    @property
    def authenticated(self) -> bool:
        return self.settings.authenticated

    def require_token(self) -> None:
        """Fail before any network call when no token is configured."""
        if not self.authenticated:
            raise ValidationError(
                "A GitHub token is required: use --security-token or set $GITHUB_TOKEN"
            )

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict | None = None,
        **kwargs,
    ) -> Any:
        """Perform one request and return the decoded JSON body.

        Extra keyword arguments (``content``, ``headers``) are passed to httpx.
        """
        response = self._send(method, path, json=json, params=params, **kwargs)
        if not response.content:
            return None
        return response.json()

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise TransportError(str(e) or type(e).__name__, url=path) from e
        logger.debug("%s %s -> %d", method, path, response.status_code)
        check_response(response)
        return response

    def paginate(self, path: str, params: dict | None = None) -> list:
        """Fetch every page of a collection endpoint, in order."""
        items: list = []
        url: str | None = path
        params = {"per_page": PER_PAGE, **(params or {})}
        while url:
            response = self._send("GET", url, params=params)
            items.extend(response.json())
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None
        return items

    @contextmanager
    def stream(self, method: str, url: str, **kwargs) -> Iterator[httpx.Response]:
        """Open a streaming response, closing it on every exit path."""
        logger.debug("%s %s (streaming)", method, url)
        try:
            with self.client.stream(method, url, **kwargs) as response:
                logger.debug("%s %s -> %d", method, url, response.status_code)
                check_response(response)
                yield response
        except httpx.RequestError as e:
            raise TransportError(str(e) or type(e).__name__, url=url) from e

    # Releases

    def get_releases(self, owner: str, repo: str) -> list[Release]:
        """Get every release for a repository, newest first."""
        data = self.paginate(f"/repos/{owner}/{repo}/releases")
        return [Release.from_api_response(r) for r in data]

    def get_latest_release(self, owner: str, repo: str) -> Release:
        """Get the latest published, non-prerelease release."""
        data = self.request("GET", f"/repos/{owner}/{repo}/releases/latest")
        return Release.from_api_response(data)

    def create_release(self, owner: str, repo: str, body: dict) -> Release:
        data = self.request("POST", f"/repos/{owner}/{repo}/releases", json=body)
        return Release.from_api_response(data)

    def edit_release(self, owner: str, repo: str, release_id: int, changes: dict) -> Release:
        data = self.request(
            "PATCH", f"/repos/{owner}/{repo}/releases/{release_id}", json=changes
        )
        return Release.from_api_response(data)

    def delete_release(self, owner: str, repo: str, release_id: int) -> None:
        self.request("DELETE", f"/repos/{owner}/{repo}/releases/{release_id}")

    # Tags

    def get_tags(self, owner: str, repo: str) -> list[Tag]:
        """Get every tag for a repository."""
        data = self.paginate(f"/repos/{owner}/{repo}/tags")
        return [Tag.from_api_response(t) for t in data]

    def create_tag_object(self, owner: str, repo: str, tag: str, sha: str, message: str) -> str:
        """Create an annotated tag object and return its SHA."""
        data = self.request(
            "POST",
            f"/repos/{owner}/{repo}/git/tags",
            json={"tag": tag, "message": message, "object": sha, "type": "commit"},
        )
        return data["sha"]

    def create_ref(self, owner: str, repo: str, ref: LightweightTag) -> LightweightTag:
        data = self.request("POST", f"/repos/{owner}/{repo}/git/refs", json=ref.to_dict())
        return LightweightTag.from_api_response(data)
