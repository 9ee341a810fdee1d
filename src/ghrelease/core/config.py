"""Configuration for github-release."""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

import httpx

from ghrelease.core.errors import ValidationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 60.0

ENV_TOKEN = "GITHUB_TOKEN"
ENV_USER = "GITHUB_USER"
ENV_REPO = "GITHUB_REPO"
ENV_API = "GITHUB_API"


def parse_repo_spec(spec: str) -> tuple[str, str]:
    """Parse a repo spec into (owner, repo).

    Accepts:
    - owner/repo
    - https://github.com/owner/repo
    - github.com/owner/repo
    """
    # Handle full URLs
    url_pattern = r"(?:https?://)?github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$"
    match = re.match(url_pattern, spec)
    if match:
        return match.group(1), match.group(2)

    # Handle owner/repo format
    if "/" in spec:
        parts = spec.split("/")
        if len(parts) == 2 and all(parts):
            return parts[0], parts[1]

    raise ValidationError(f"Invalid repo spec: {spec}. Use 'owner/repo' or GitHub URL.")


@dataclass(frozen=True)
class Settings:
    """Credentials and connection settings for one invocation.

    Built once at startup from the environment, then narrowed with the
    explicit command-line values through :meth:`with_overrides`.
    """

    token: str | None = None
    user: str | None = None
    repo: str | None = None
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    # Custom httpx transport (proxies, mounts, tests); None means the default
    transport: httpx.BaseTransport | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Create settings from GITHUB_* environment variables."""
        if environ is None:
            environ = os.environ
        settings = cls(
            token=environ.get(ENV_TOKEN) or None,
            api_url=(environ.get(ENV_API) or DEFAULT_API_URL).rstrip("/"),
        )
        # $GITHUB_REPO may be owner/repo, parsed like --repo
        return settings.with_overrides(
            user=environ.get(ENV_USER) or None,
            repo=environ.get(ENV_REPO) or None,
        )

    def with_overrides(
        self,
        token: str | None = None,
        user: str | None = None,
        repo: str | None = None,
    ) -> "Settings":
        """Return a copy where every explicitly given value wins.

        ``repo`` may also be ``owner/repo`` or a GitHub URL, in which case it
        sets the user as well.
        """
        if repo and "/" in repo:
            parsed_user, repo = parse_repo_spec(repo)
            if user and user != parsed_user:
                raise ValidationError(
                    f"--user {user} conflicts with the owner in --repo ({parsed_user})"
                )
            user = parsed_user
        return replace(
            self,
            token=token or self.token,
            user=user or self.user,
            repo=repo or self.repo,
        )

    def require_repo(self) -> tuple[str, str]:
        """Return (user, repo), failing if either is unknown."""
        if not self.user:
            raise ValidationError(f"No user given: use --user or set ${ENV_USER}")
        if not self.repo:
            raise ValidationError(f"No repo given: use --repo or set ${ENV_REPO}")
        return self.user, self.repo

    @property
    def authenticated(self) -> bool:
        return bool(self.token)
