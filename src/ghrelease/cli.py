"""CLI entry point for github-release."""

import logging

import click
from rich.markup import escape

from ghrelease import __version__
from ghrelease.commands import download, info, release, tag, upload
from ghrelease.commands.common import err_console
from ghrelease.core.config import Settings
from ghrelease.core.errors import ValidationError
from ghrelease.core.log import setup_logging

logger = logging.getLogger("ghrelease")


@click.group()
@click.version_option(version=__version__, prog_name="github-release")
@click.option("--verbose", "-v", "verbosity", count=True, help="Be verbose (repeat for HTTP details)")
@click.option("--quiet", "-q", is_flag=True, help="Do not print anything, even errors (unless --verbose is given)")
@click.pass_context
def main(ctx, verbosity, quiet):
    """github-release - manage GitHub releases, tags and assets.

    Credentials and the target repository default to $GITHUB_TOKEN,
    $GITHUB_USER and $GITHUB_REPO; $GITHUB_API points at a GitHub
    Enterprise API.

    Examples:

        github-release release -u me -r tool -t v1.0.0 -d "First release"

        github-release upload -r me/tool -t v1.0.0 -n tool.tar.gz -f dist/tool.tar.gz

        github-release download -r me/tool --latest -n tool.tar.gz -f - | tar xz
    """
    setup_logging(verbosity, quiet)
    err_console.quiet = quiet and not verbosity
    if ctx.obj is None:
        try:
            ctx.obj = Settings.from_env()
        except ValidationError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise SystemExit(1)


@main.result_callback()
def completed(*args, **kwargs):
    logger.info("Command completed successfully")


# Register commands
main.add_command(download.download)
main.add_command(upload.upload)
main.add_command(release.release)
main.add_command(release.edit)
main.add_command(release.delete)
main.add_command(info.info)
main.add_command(tag.tag)


if __name__ == "__main__":
    main()
