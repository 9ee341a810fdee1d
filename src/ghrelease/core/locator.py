"""Resolve tags and names to release and asset resources."""

import logging

from ghrelease.core.errors import APIError, NotFoundError
from ghrelease.core.github import GitHubClient
from ghrelease.models.release import Asset, Release

logger = logging.getLogger(__name__)


def list_releases(client: GitHubClient, owner: str, repo: str) -> list[Release]:
    """List every release of a repository across all pages."""
    releases = client.get_releases(owner, repo)
    logger.debug("%s/%s has %d release(s)", owner, repo, len(releases))
    return releases


def find_release_by_tag(client: GitHubClient, owner: str, repo: str, tag: str) -> Release:
    """Find the release whose tag name is exactly ``tag``.

    The full listing is used instead of ``/releases/tags/{tag}`` because that
    endpoint does not return draft releases.
    """
    for release in list_releases(client, owner, repo):
        if release.tag_name == tag:
            logger.debug("Found release %s (id %d)", release.tag_name, release.id)
            return release
    raise NotFoundError("release", tag, f"{owner}/{repo}")


def find_latest_release(client: GitHubClient, owner: str, repo: str) -> Release:
    """Get the latest release through its dedicated endpoint."""
    try:
        return client.get_latest_release(owner, repo)
    except APIError as e:
        if e.status_code == 404:
            raise NotFoundError("release", "latest", f"{owner}/{repo}") from e
        raise


def find_asset(release: Release, name: str) -> Asset:
    """Find an asset of ``release`` by exact name."""
    for asset in release.assets:
        if asset.name == name:
            return asset
    raise NotFoundError("asset", name, f"release {release.tag_name}")
