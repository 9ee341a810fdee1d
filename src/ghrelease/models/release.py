"""GitHub release, asset and tag data models."""

from dataclasses import dataclass, field
from datetime import datetime


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO 8601 timestamp (``2024-01-02T03:04:05Z``)."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class Asset:
    """Represents a GitHub release asset."""

    id: int
    name: str
    url: str
    download_url: str
    size: int
    content_type: str
    label: str = ""
    state: str = "uploaded"
    download_count: int = 0
    release_id: int | None = None

    @classmethod
    def from_api_response(cls, data: dict, release_id: int | None = None) -> "Asset":
        """Create Asset from GitHub API response."""
        return cls(
            id=data["id"],
            name=data["name"],
            url=data["url"],
            download_url=data.get("browser_download_url", ""),
            size=data.get("size", 0),
            content_type=data.get("content_type", "application/octet-stream"),
            label=data.get("label") or "",
            state=data.get("state", "uploaded"),
            download_count=data.get("download_count", 0),
            release_id=release_id,
        )


@dataclass
class Release:
    """Represents a GitHub release."""

    id: int
    tag_name: str
    name: str
    body: str
    draft: bool
    prerelease: bool
    assets: list[Asset] = field(default_factory=list)
    target_commitish: str = ""
    created_at: datetime | None = None
    published_at: datetime | None = None
    upload_url: str = ""
    html_url: str = ""
    tarball_url: str = ""
    zipball_url: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "Release":
        """Create Release from GitHub API response."""
        release_id = data["id"]
        assets = [
            Asset.from_api_response(a, release_id=release_id)
            for a in data.get("assets", [])
        ]
        return cls(
            id=release_id,
            tag_name=data["tag_name"],
            name=data.get("name") or data["tag_name"],
            body=data.get("body") or "",
            draft=data.get("draft", False),
            prerelease=data.get("prerelease", False),
            assets=assets,
            target_commitish=data.get("target_commitish") or "",
            created_at=parse_timestamp(data.get("created_at")),
            published_at=parse_timestamp(data.get("published_at")),
            upload_url=data.get("upload_url", ""),
            html_url=data.get("html_url", ""),
            tarball_url=data.get("tarball_url") or "",
            zipball_url=data.get("zipball_url") or "",
        )

    def __str__(self) -> str:
        kind = "draft" if self.draft else "pre-release" if self.prerelease else "release"
        return f"{self.tag_name}, name: '{self.name}' ({kind})"


@dataclass
class Commit:
    """Commit reference attached to a tag."""

    sha: str
    url: str


@dataclass
class Tag:
    """Represents a git tag as listed by the tags endpoint."""

    name: str
    commit: Commit
    zipball_url: str = ""
    tarball_url: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "Tag":
        """Create Tag from GitHub API response."""
        commit = data.get("commit", {})
        return cls(
            name=data["name"],
            commit=Commit(sha=commit.get("sha", ""), url=commit.get("url", "")),
            zipball_url=data.get("zipball_url", ""),
            tarball_url=data.get("tarball_url", ""),
        )

    def __str__(self) -> str:
        return f"{self.name} (commit: {self.commit.url})"


@dataclass
class LightweightTag:
    """The fields required to create a lightweight tag reference."""

    ref: str
    sha: str

    @classmethod
    def for_tag(cls, tag: str, sha: str) -> "LightweightTag":
        return cls(ref=f"refs/tags/{tag}", sha=sha)

    @classmethod
    def from_api_response(cls, data: dict) -> "LightweightTag":
        """Create LightweightTag from a git ref response."""
        return cls(ref=data["ref"], sha=data["object"]["sha"])

    def to_dict(self) -> dict:
        return {"ref": self.ref, "sha": self.sha}

    @property
    def name(self) -> str:
        return self.ref.removeprefix("refs/tags/")
