"""Info command implementation."""

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ghrelease.commands.common import (
    console,
    handle_errors,
    repo_options,
    repo_settings,
)
from ghrelease.core import operations
from ghrelease.core.github import GitHubClient
from ghrelease.models.release import Release


def _timestamp(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


def render_release(release: Release) -> Panel:
    """Render one release with its assets."""
    lines = [
        f"[bold]Name:[/bold] {escape(release.name)}",
        f"[bold]Description:[/bold] {escape(release.body)}",
        f"[bold]Target:[/bold] {escape(release.target_commitish or '-')}",
        f"[bold]Created:[/bold] {_timestamp(release.created_at)}",
        f"[bold]Published:[/bold] {_timestamp(release.published_at)}",
    ]

    flags = []
    if release.draft:
        flags.append("[yellow](draft)[/yellow]")
    if release.prerelease:
        flags.append("[yellow](prerelease)[/yellow]")
    title = " ".join([f"[green]{escape(release.tag_name)}[/green]", *flags])

    if not release.assets:
        lines.append("[bold]Assets:[/bold] none")
        return Panel("\n".join(lines), title=title, title_align="left")

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Asset")
    table.add_column("Label")
    table.add_column("Size", justify="right")
    table.add_column("Downloads", justify="right")
    for asset in release.assets:
        size_mb = asset.size / (1024 * 1024)
        table.add_row(
            escape(asset.name),
            escape(asset.label),
            f"{size_mb:.1f} MB",
            str(asset.download_count),
        )

    body = Table.grid()
    body.add_row("\n".join(lines))
    body.add_row(table)
    return Panel(body, title=title, title_align="left")


@click.command()
@repo_options
@click.option("--tag", "-t", help="Git tag to query (optional)")
@click.pass_obj
@handle_errors
def info(settings, token, user, repo, tag):
    """Show tags and releases of a repository.

    With --tag, only the release for that tag is shown.
    """
    settings, owner, repo = repo_settings(settings, token, user, repo)

    with GitHubClient(settings) as client:
        repo_info = operations.info(client, owner, repo, tag=tag)

    console.print("[bold]Tags:[/bold]")
    if not repo_info.tags:
        console.print("  none")
    for t in repo_info.tags:
        console.print(f"  - {escape(str(t))}")

    console.print("[bold]Releases:[/bold]")
    if not repo_info.releases:
        console.print("  none")
    for release in repo_info.releases:
        console.print(render_release(release))
