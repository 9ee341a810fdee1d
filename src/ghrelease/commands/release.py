"""Release, edit and delete command implementations."""

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
@click.option("--tag", "-t", required=True, help="Git tag to create a release from")
@click.option("--name", "-n", help="Name of the release (defaults to tag)")
@click.option("--description", "-d", help="Description of the release (defaults to tag)")
@click.option("--target", "-c", help="Commit SHA or branch to create release of (defaults to the default branch)")
@click.option("--draft", is_flag=True, help="The release is a draft")
@click.option("--pre-release", "-p", "prerelease", is_flag=True, help="The release is a pre-release")
@click.pass_obj
@handle_errors
def release(settings, token, user, repo, tag, name, description, target, draft, prerelease):
    """Create a new release."""
    settings, owner, repo = repo_settings(settings, token, user, repo)

    with GitHubClient(settings) as client:
        created = operations.create_release(
            client, owner, repo, tag,
            name=name,
            description=description,
            target=target,
            draft=draft,
            prerelease=prerelease,
        )

    err_console.print(f"[green]✓[/green] Created release [bold]{created.tag_name}[/bold]")
    if created.html_url:
        err_console.print(f"  {created.html_url}")


@click.command()
@repo_options
@click.option("--tag", "-t", required=True, help="Git tag of the release to edit")
@click.option("--name", "-n", help="New name of the release")
@click.option("--description", "-d", help="New description of the release")
@click.option("--draft/--no-draft", default=None, help="Mark or unmark the release as a draft")
@click.option(
    "--pre-release/--no-pre-release", "-p", "prerelease",
    default=None,
    help="Mark or unmark the release as a pre-release",
)
@click.pass_obj
@handle_errors
def edit(settings, token, user, repo, tag, name, description, draft, prerelease):
    """Edit an existing release.

    Only the given fields change; everything else keeps its current value.
    """
    settings, owner, repo = repo_settings(settings, token, user, repo)

    with GitHubClient(settings) as client:
        edited = operations.edit_release(
            client, owner, repo, tag,
            name=name,
            description=description,
            draft=draft,
            prerelease=prerelease,
        )

    err_console.print(f"[green]✓[/green] Updated release [bold]{edited.tag_name}[/bold]")


@click.command()
@repo_options
@click.option("--tag", "-t", required=True, help="Git tag of the release to delete")
@click.pass_obj
@handle_errors
def delete(settings, token, user, repo, tag):
    """Delete a release and its assets.

    The git tag itself is kept.
    """
    settings, owner, repo = repo_settings(settings, token, user, repo)

    with GitHubClient(settings) as client:
        deleted = operations.delete_release(client, owner, repo, tag)

    err_console.print(f"[green]✓[/green] Deleted release [bold]{deleted.tag_name}[/bold]")
