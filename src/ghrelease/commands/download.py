"""Download command implementation."""

from pathlib import Path

import click

from ghrelease.commands.common import (
    STDIO,
    err_console,
    handle_errors,
    open_stream,
    repo_options,
    repo_settings,
    show_progress,
)
from ghrelease.core import operations
from ghrelease.core.github import GitHubClient
from ghrelease.core.errors import GitHubError
from ghrelease.core.streamer import download_asset, transfer_progress


@click.command()
@repo_options
@click.option("--tag", "-t", help="Git tag to download from (required if --latest is not given)")
@click.option("--latest", "-l", is_flag=True, help="Download from the latest release (required if --tag is not given)")
@click.option("--name", "-n", required=True, help="Name of the asset")
@click.option("--file", "-f", "path", help="Where to write the asset (defaults to NAME, - for stdout)")
@click.pass_obj
@handle_errors
def download(settings, token, user, repo, tag, latest, name, path):
    """Download a release asset.

    Either --tag or --latest selects the release.
    """
    settings, owner, repo = repo_settings(settings, token, user, repo)

    with GitHubClient(settings) as client:
        asset = operations.locate_asset(client, owner, repo, name, tag=tag, latest=latest)
        path = path or asset.name

        opened = False
        try:
            with open_stream(path, "wb") as destination, transfer_progress(
                f"Downloading {asset.name}", asset.size, enabled=show_progress()
            ) as on_chunk:
                opened = True
                written = download_asset(client, asset, destination, on_chunk=on_chunk)
        except (GitHubError, OSError, KeyboardInterrupt):
            # Don't leave a truncated file behind
            if opened and path != STDIO:
                Path(path).unlink(missing_ok=True)
            raise

    if path != STDIO:
        err_console.print(
            f"[green]✓[/green] Downloaded [bold]{asset.name}[/bold] ({written:,} bytes) to {path}"
        )
