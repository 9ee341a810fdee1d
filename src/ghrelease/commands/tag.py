"""Tag command implementation."""

import click

from ghrelease.commands.common import (
    err_console,
    handle_errors,
    repo_options,
    repo_settings,
)
from ghrelease.core import operations
from ghrelease.core.github import GitHubClient


@click.command()
@repo_options
@click.option("--tag", "-t", required=True, help="Git tag to create")
@click.option("--sha", "-c", required=True, help="Git commit SHA to associate the tag with")
@click.option(
    "--message", "-m", "--description", "-d", "message",
    help="Tag message; makes an annotated tag instead of a lightweight one",
)
@click.pass_obj
@handle_errors
def tag(settings, token, user, repo, tag, sha, message):
    """Create a git tag on a commit."""
    settings, owner, repo = repo_settings(settings, token, user, repo)

    with GitHubClient(settings) as client:
        ref = operations.create_tag(client, owner, repo, tag, sha, message=message)

    kind = "annotated tag" if message else "tag"
    err_console.print(f"[green]✓[/green] Created {kind} [bold]{ref.name}[/bold] at {sha}")
