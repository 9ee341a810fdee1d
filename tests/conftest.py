"""Shared fixtures: an in-memory GitHub behind httpx.MockTransport."""

import json
import re
from dataclasses import replace
from urllib.parse import urlencode

import httpx
import pytest
from click.testing import CliRunner

from ghrelease.cli import main
from ghrelease.core.config import Settings
from ghrelease.core.github import GitHubClient

API = "https://api.github.com"
UPLOADS = "https://uploads.github.com"
STORAGE = "https://objects.githubusercontent.com"

OWNER = "octo"
REPO = "tool"
TOKEN = "t0ken"


def _json(status: int, data) -> httpx.Response:
    return httpx.Response(status, json=data)


def _error(status: int, message: str, **error) -> httpx.Response:
    payload = {"message": message}
    if error:
        payload["errors"] = [error]
    return httpx.Response(status, json=payload)


class BodyStream(httpx.SyncByteStream):
    """A response body served lazily, optionally failing after the last chunk."""

    def __init__(self, chunks: list[bytes], error: Exception | None = None):
        self.chunks = chunks
        self.error = error

    def __iter__(self):
        yield from self.chunks
        if self.error is not None:
            raise self.error


class FakeGitHub:
    """Just enough of the releases, tags and git refs API."""

    def __init__(self, owner: str = OWNER, repo: str = REPO):
        self.owner = owner
        self.repo = repo
        self.releases: list[dict] = []  # newest first, like the API
        self.tags: list[dict] = []
        self.refs: list[dict] = []
        self.tag_objects: list[dict] = []
        self.blobs: dict[int, bytes] = {}
        # asset id -> "redirect-loop", "unavailable", "reset" or "bad-gzip"
        self.blob_failures: dict[int, str] = {}
        self.requests: list[httpx.Request] = []
        self.page_size: int | None = None
        self._next_id = 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def prefix(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _id(self) -> int:
        self._next_id += 1
        return self._next_id

    # Seeding

    def add_release(
        self,
        tag: str,
        name: str | None = None,
        body: str | None = None,
        draft: bool = False,
        prerelease: bool = False,
        target: str = "main",
    ) -> dict:
        release_id = self._id()
        release = {
            "id": release_id,
            "tag_name": tag,
            "name": name if name is not None else tag,
            "body": body if body is not None else tag,
            "draft": draft,
            "prerelease": prerelease,
            "target_commitish": target,
            "created_at": "2024-01-02T03:04:05Z",
            "published_at": None if draft else "2024-01-02T03:05:00Z",
            "upload_url": f"{UPLOADS}{self.prefix}/releases/{release_id}/assets{{?name,label}}",
            "html_url": f"https://github.com/{self.owner}/{self.repo}/releases/tag/{tag}",
            "tarball_url": f"{API}{self.prefix}/tarball/{tag}",
            "zipball_url": f"{API}{self.prefix}/zipball/{tag}",
            "assets": [],
        }
        self.releases.insert(0, release)
        return release

    def add_asset(self, release: dict, name: str, content: bytes, label: str = "") -> dict:
        asset_id = self._id()
        asset = {
            "id": asset_id,
            "name": name,
            "label": label,
            "url": f"{API}{self.prefix}/releases/assets/{asset_id}",
            "browser_download_url": (
                f"https://github.com/{self.owner}/{self.repo}/releases/download/"
                f"{release['tag_name']}/{name}"
            ),
            "size": len(content),
            "content_type": "application/octet-stream",
            "state": "uploaded",
            "download_count": 0,
        }
        release["assets"].append(asset)
        self.blobs[asset_id] = content
        return asset

    def add_tag(self, name: str, sha: str) -> dict:
        tag = {
            "name": name,
            "commit": {"sha": sha, "url": f"{API}{self.prefix}/commits/{sha}"},
            "zipball_url": f"{API}{self.prefix}/zipball/{name}",
            "tarball_url": f"{API}{self.prefix}/tarball/{name}",
        }
        self.tags.append(tag)
        return tag

    def release(self, tag: str) -> dict | None:
        return next((r for r in self.releases if r["tag_name"] == tag), None)

    def calls(self, method: str | None = None) -> list[httpx.Request]:
        return [r for r in self.requests if method is None or r.method == method]

    # Routing

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if host == "objects.githubusercontent.com":
            match = re.fullmatch(r"/blobs/(\d+)", path)
            if match and int(match.group(1)) in self.blobs:
                return self._blob(request, int(match.group(1)))
            return _error(404, "Not Found")

        if host == "uploads.github.com":
            match = re.fullmatch(rf"{self.prefix}/releases/(\d+)/assets", path)
            if request.method == "POST" and match:
                return self._upload(request, int(match.group(1)))
            return _error(404, "Not Found")

        if not path.startswith(self.prefix):
            return _error(404, "Not Found")
        route = path[len(self.prefix):]
        method = request.method

        if route == "/releases" and method == "GET":
            return self._page(request, self.releases)
        if route == "/releases" and method == "POST":
            return self._create_release(json.loads(request.content))
        if route == "/releases/latest" and method == "GET":
            for release in self.releases:
                if not release["draft"] and not release["prerelease"]:
                    return _json(200, release)
            return _error(404, "Not Found")

        match = re.fullmatch(r"/releases/assets/(\d+)", route)
        if match and method == "GET":
            asset_id = int(match.group(1))
            if asset_id not in self.blobs:
                return _error(404, "Not Found")
            return httpx.Response(302, headers={"Location": f"{STORAGE}/blobs/{asset_id}"})

        match = re.fullmatch(r"/releases/(\d+)", route)
        if match:
            release = next((r for r in self.releases if r["id"] == int(match.group(1))), None)
            if release is None:
                return _error(404, "Not Found")
            if method == "PATCH":
                release.update(json.loads(request.content))
                return _json(200, release)
            if method == "DELETE":
                self.releases.remove(release)
                return httpx.Response(204)

        if route == "/tags" and method == "GET":
            return self._page(request, self.tags)
        if route == "/git/tags" and method == "POST":
            body = json.loads(request.content)
            obj = {"sha": f"tagobj{len(self.tag_objects) + 1:034d}", **body}
            self.tag_objects.append(obj)
            return _json(201, obj)
        if route == "/git/refs" and method == "POST":
            body = json.loads(request.content)
            if any(ref["ref"] == body["ref"] for ref in self.refs):
                return _error(422, "Reference already exists")
            ref = {"ref": body["ref"], "object": {"sha": body["sha"], "type": "commit"}}
            self.refs.append(ref)
            return _json(201, ref)

        return _error(404, "Not Found")

    def _page(self, request: httpx.Request, items: list) -> httpx.Response:
        params = request.url.params
        per_page = self.page_size or int(params.get("per_page", 30))
        page = int(params.get("page", 1))
        start = (page - 1) * per_page
        headers = {}
        if start + per_page < len(items):
            query = urlencode({"per_page": per_page, "page": page + 1})
            headers["Link"] = f'<{API}{request.url.path}?{query}>; rel="next"'
        return httpx.Response(200, json=items[start:start + per_page], headers=headers)

    def _create_release(self, body: dict) -> httpx.Response:
        if self.release(body["tag_name"]):
            return _error(
                422, "Validation Failed",
                resource="Release", code="already_exists", field="tag_name",
            )
        release = self.add_release(
            body["tag_name"],
            name=body.get("name"),
            body=body.get("body"),
            draft=body.get("draft", False),
            prerelease=body.get("prerelease", False),
            target=body.get("target_commitish", "main"),
        )
        return _json(201, release)

    def _blob(self, request: httpx.Request, asset_id: int) -> httpx.Response:
        content = self.blobs[asset_id]
        failure = self.blob_failures.get(asset_id)
        if failure == "redirect-loop":
            return httpx.Response(302, headers={"Location": str(request.url)})
        if failure == "unavailable":
            return _error(503, "Service Unavailable")
        if failure == "reset":
            half = len(content) // 2
            return httpx.Response(
                200,
                headers={"Content-Length": str(len(content))},
                stream=BodyStream([content[:half]], error=httpx.ReadError("Connection reset by peer")),
            )
        if failure == "bad-gzip":
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                stream=BodyStream([b"this is not gzip data"]),
            )
        return httpx.Response(200, content=content)

    def _upload(self, request: httpx.Request, release_id: int) -> httpx.Response:
        release = next((r for r in self.releases if r["id"] == release_id), None)
        if release is None:
            return _error(404, "Not Found")
        name = request.url.params["name"]
        if any(a["name"] == name for a in release["assets"]):
            return _error(
                422, "Validation Failed",
                resource="ReleaseAsset", code="already_exists", field="name",
            )
        asset = self.add_asset(
            release, name, request.content, label=request.url.params.get("label", "")
        )
        asset["content_type"] = request.headers.get("content-type", "")
        return _json(201, asset)


@pytest.fixture
def fake():
    return FakeGitHub()


@pytest.fixture
def settings():
    return Settings(token=TOKEN, user=OWNER, repo=REPO)


@pytest.fixture
def client(fake, settings):
    with GitHubClient(settings, transport=fake.transport) as c:
        yield c


@pytest.fixture
def anonymous_client(fake):
    with GitHubClient(Settings(user=OWNER, repo=REPO), transport=fake.transport) as c:
        yield c


@pytest.fixture
def run_cli(fake):
    """Invoke the CLI against the fake, with GITHUB_* set to the fake repo."""
    runner = CliRunner()

    def run(*args, env=None, input=None):
        environ = {
            "GITHUB_TOKEN": TOKEN,
            "GITHUB_USER": OWNER,
            "GITHUB_REPO": REPO,
            "GITHUB_API": None,
            **(env or {}),
        }
        settings = Settings.from_env({k: v for k, v in environ.items() if v is not None})
        obj = replace(settings, transport=fake.transport)
        return runner.invoke(main, list(args), env=environ, input=input, obj=obj)

    return run
