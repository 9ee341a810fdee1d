"""Error types raised by github-release."""

from datetime import datetime


class GitHubError(Exception):
    """Base class for every failure the core reports."""

    pass


class TransportError(GitHubError):
    """The request failed below the API level.

    Covers DNS, connect, TLS and timeout failures as well as redirect loops
    and bodies that cannot be decoded.
    """

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.message = message
        self.url = url

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} ({self.url})"
        return self.message


class APIError(GitHubError):
    """GitHub answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: list[str] | None = None,
        rate_limit_reset: datetime | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        self.rate_limit_reset = rate_limit_reset

    def __str__(self) -> str:
        text = f"GitHub API returned {self.status_code}: {self.message}"
        if self.errors:
            text += f" ({'; '.join(self.errors)})"
        return text


class NotFoundError(GitHubError):
    """No release, asset or tag matches the requested identifier."""

    def __init__(self, resource: str, identifier: str, location: str = ""):
        super().__init__(resource, identifier)
        self.resource = resource
        self.identifier = identifier
        self.location = location

    def __str__(self) -> str:
        text = f"{self.resource} '{self.identifier}' not found"
        if self.location:
            text += f" in {self.location}"
        return text


class ValidationError(GitHubError):
    """Invalid or missing input, detected before any network call."""

    pass
