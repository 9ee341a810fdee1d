"""Options and helpers shared by the commands."""

import functools
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

import click
from rich.console import Console
from rich.markup import escape

from ghrelease.core.config import ENV_REPO, ENV_TOKEN, ENV_USER, Settings
from ghrelease.core.errors import GitHubError

logger = logging.getLogger(__name__)

# Command output goes to stdout, status and errors to stderr so that
# `download -f -` can write the asset to stdout.
console = Console()
err_console = Console(stderr=True)

STDIO = "-"


def repo_options(f):
    """Add the --security-token/--user/--repo options every verb takes."""
    f = click.option(
        "--repo", "-r",
        help=f"GitHub repo, or owner/repo (required if ${ENV_REPO} is not set)",
    )(f)
    f = click.option(
        "--user", "-u",
        help=f"GitHub user (required if ${ENV_USER} is not set)",
    )(f)
    f = click.option(
        "--security-token", "-s", "token",
        help=f"GitHub token (${ENV_TOKEN} if set), required for private repos and changes",
    )(f)
    return f


def repo_settings(
    settings: Settings,
    token: str | None,
    user: str | None,
    repo: str | None,
) -> tuple[Settings, str, str]:
    """Apply the explicit flags and return (settings, owner, repo)."""
    settings = settings.with_overrides(token=token, user=user, repo=repo)
    owner, name = settings.require_repo()
    return settings, owner, name


@contextmanager
def open_stream(path: str, mode: str) -> Iterator[BinaryIO]:
    """Open ``path`` in binary ``mode``; ``-`` means stdin or stdout.

    The standard streams are left open on exit.
    """
    if path == STDIO:
        yield sys.stdin.buffer if "r" in mode else sys.stdout.buffer
        return
    with open(path, mode) as f:
        yield f


def show_progress() -> bool:
    return err_console.is_terminal and not err_console.quiet


def handle_errors(f):
    """Report core failures on stderr and exit with status 1."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (GitHubError, OSError) as e:
            logger.debug("Command failed", exc_info=True)
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise SystemExit(1)

    return wrapper
