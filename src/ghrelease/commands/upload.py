"""Upload command implementation."""

import click

from ghrelease.commands.common import (
    err_console,
    handle_errors,
    open_stream,
    repo_options,
    repo_settings,
    show_progress,
)
from ghrelease.core import operations
from ghrelease.core.github import GitHubClient
from ghrelease.core.streamer import stream_length, transfer_progress


@click.command()
@repo_options
@click.option("--tag", "-t", required=True, help="Git tag of the release to upload to")
@click.option("--name", "-n", required=True, help="Name of the asset")
@click.option("--label", "-l", help="Label (description) of the asset")
@click.option("--file", "-f", "path", required=True, help="File to upload (- for stdin)")
@click.pass_obj
@handle_errors
def upload(settings, token, user, repo, tag, name, label, path):
    """Upload a file as an asset of an existing release."""
    settings, owner, repo = repo_settings(settings, token, user, repo)

    with GitHubClient(settings) as client, open_stream(path, "rb") as source:
        length = stream_length(source)
        with transfer_progress(f"Uploading {name}", length, enabled=show_progress()) as on_chunk:
            asset = operations.upload(
                client, owner, repo, tag, name, source,
                label=label, length=length, on_chunk=on_chunk,
            )

    err_console.print(
        f"[green]✓[/green] Uploaded [bold]{asset.name}[/bold] ({asset.size:,} bytes) to {tag}"
    )
