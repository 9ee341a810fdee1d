"""Release, tag and asset operations behind the command-line verbs.

Each function composes the locator, the HTTP client and the streamer into one
logical operation. Failures propagate as :class:`~ghrelease.core.errors.GitHubError`
subclasses; nothing here prints or exits.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO

from ghrelease.core.errors import ValidationError
from ghrelease.core.github import GitHubClient
from ghrelease.core.locator import (
    find_asset,
    find_latest_release,
    find_release_by_tag,
    list_releases,
)
from ghrelease.core.streamer import ChunkCallback, upload_asset
from ghrelease.models.release import Asset, LightweightTag, Release, Tag

logger = logging.getLogger(__name__)


@dataclass
class RepoInfo:
    """Tags and releases of a repository, as shown by ``info``."""

    tags: list[Tag] = field(default_factory=list)
    releases: list[Release] = field(default_factory=list)


def info(client: GitHubClient, owner: str, repo: str, tag: str | None = None) -> RepoInfo:
    """Collect tags and releases, or only those for ``tag`` when given."""
    if tag:
        release = find_release_by_tag(client, owner, repo, tag)
        tags = [t for t in client.get_tags(owner, repo) if t.name == tag]
        return RepoInfo(tags=tags, releases=[release])

    return RepoInfo(
        tags=client.get_tags(owner, repo),
        releases=list_releases(client, owner, repo),
    )


def create_release(
    client: GitHubClient,
    owner: str,
    repo: str,
    tag: str,
    name: str | None = None,
    description: str | None = None,
    target: str | None = None,
    draft: bool = False,
    prerelease: bool = False,
) -> Release:
    """Create a release for ``tag``; name and description default to the tag."""
    client.require_token()
    body = {
        "tag_name": tag,
        "name": name or tag,
        "body": description or tag,
        "draft": draft,
        "prerelease": prerelease,
    }
    if target:
        body["target_commitish"] = target

    release = client.create_release(owner, repo, body)
    logger.info("Created release %s", release)
    return release


def edit_release(
    client: GitHubClient,
    owner: str,
    repo: str,
    tag: str,
    name: str | None = None,
    description: str | None = None,
    draft: bool | None = None,
    prerelease: bool | None = None,
) -> Release:
    """Change the given fields of the release for ``tag``.

    Fields left as None are not sent, so the release keeps their values.
    """
    client.require_token()
    release = find_release_by_tag(client, owner, repo, tag)

    changes = {
        key: value
        for key, value in (
            ("name", name),
            ("body", description),
            ("draft", draft),
            ("prerelease", prerelease),
        )
        if value is not None
    }
    if not changes:
        logger.info("Nothing to change for release %s", release.tag_name)
        return release

    logger.debug("Editing release %d: %s", release.id, sorted(changes))
    return client.edit_release(owner, repo, release.id, changes)


def delete_release(client: GitHubClient, owner: str, repo: str, tag: str) -> Release:
    """Delete the release for ``tag`` and return what was deleted."""
    client.require_token()
    release = find_release_by_tag(client, owner, repo, tag)
    client.delete_release(owner, repo, release.id)
    logger.info("Deleted release %s", release.tag_name)
    return release


def create_tag(
    client: GitHubClient,
    owner: str,
    repo: str,
    tag: str,
    sha: str,
    message: str | None = None,
) -> LightweightTag:
    """Create ``tag`` pointing at commit ``sha``.

    Without a message this is a lightweight tag. With one, an annotated tag
    object is created first and the reference points at that object.
    """
    client.require_token()
    if not sha:
        raise ValidationError("A commit SHA is required to create a tag")

    target = sha
    if message:
        target = client.create_tag_object(owner, repo, tag, sha, message)
        logger.debug("Created tag object %s for %s", target, tag)

    ref = client.create_ref(owner, repo, LightweightTag.for_tag(tag, target))
    logger.info("Created tag %s at %s", ref.name, sha)
    return ref


def upload(
    client: GitHubClient,
    owner: str,
    repo: str,
    tag: str,
    name: str,
    source: BinaryIO,
    label: str | None = None,
    length: int | None = None,
    on_chunk: ChunkCallback | None = None,
) -> Asset:
    """Upload ``source`` as asset ``name`` to the release for ``tag``."""
    client.require_token()
    release = find_release_by_tag(client, owner, repo, tag)
    return upload_asset(
        client, release, name, source, label=label, length=length, on_chunk=on_chunk
    )


def resolve_release(
    client: GitHubClient,
    owner: str,
    repo: str,
    tag: str | None = None,
    latest: bool = False,
) -> Release:
    """Find the release to download from: by tag, or the latest one."""
    if tag and latest:
        raise ValidationError("Use either --tag or --latest, not both")
    if not tag and not latest:
        raise ValidationError("Either --tag or --latest is required")
    if latest:
        return find_latest_release(client, owner, repo)
    return find_release_by_tag(client, owner, repo, tag)


def locate_asset(
    client: GitHubClient,
    owner: str,
    repo: str,
    name: str,
    tag: str | None = None,
    latest: bool = False,
) -> Asset:
    """Find asset ``name`` in the release selected by ``tag`` or ``latest``.

    The download command streams the result with
    :func:`~ghrelease.core.streamer.download_asset`.
    """
    release = resolve_release(client, owner, repo, tag=tag, latest=latest)
    return find_asset(release, name)
