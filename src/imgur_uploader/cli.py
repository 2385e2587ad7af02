"""Command-line interface for imgur_uploader."""

from __future__ import annotations

import logging
import sys
from typing import NoReturn

import click

from imgur_uploader import Config, DeleteResult, ImgurClient, ImgurError
from imgur_uploader.config import HISTORY_DISABLED
from imgur_uploader.models import CREDITS_RESET_FIELD


def get_client(config: Config) -> ImgurClient:
    """Create an ImgurClient for the given configuration."""
    return ImgurClient.from_config(config)


def _fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _report_deletions(results: list[DeleteResult]) -> int:
    """Print one line per deletion and return the number of failures."""
    failed = 0
    for result in results:
        if result.success:
            click.echo(click.style("✓ ", fg="green") + f"Deleted {result.key}")
        else:
            failed += 1
            click.echo(
                click.style("✗ ", fg="red") + f"{result.key}: {result.error}",
                err=True,
            )
    return failed


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="imgur-uploader")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Imgur CLI - Upload images anonymously and delete them later.

    Configuration is read from the environment: APP_ID is the Imgur client
    id, APP_HISTORY the history log path (set it to /dev/null to disable
    history).
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    if ctx.obj is None and ctx.invoked_subcommand != "help":
        try:
            ctx.obj = Config.from_env()
        except ImgurError as e:
            _fail(str(e))


@main.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show usage information."""
    click.echo(ctx.parent.get_help() if ctx.parent else ctx.get_help())


@main.command("config")
@click.pass_obj
def show_config(config: Config) -> None:
    """Show the current configuration."""
    click.echo(f"APP_ID: {config.client_id}")
    click.echo(f"APP_HISTORY: {config.history_path or HISTORY_DISABLED}")


@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.option("--title", "-t", default=None, help="Title of the image (or album)")
@click.option("--description", "-d", default=None, help="Description of each image")
@click.pass_obj
def upload(
    config: Config,
    targets: tuple[str, ...],
    title: str | None,
    description: str | None,
) -> None:
    """Upload images to Imgur.

    TARGETS: Local files, http(s) URLs or base64 data URIs. More than one
    target is grouped into a hidden album.

    Links are printed on stdout; delete keys and problems on stderr.

    Examples:

        imgur upload cat.png

        imgur upload https://example.com/dog.jpg

        imgur upload *.png --title "Holiday"
    """
    try:
        with get_client(config) as client:
            album, results = client.upload_many(
                targets, title=title, description=description
            )
    except ImgurError as e:
        _fail(str(e))

    if album is not None:
        click.echo(album.link)
        click.echo(f"Album delete key: {album.key}", err=True)

    failed = 0
    for result in results:
        if result.success:
            click.echo(result.link)
            click.echo(
                click.style("✓ ", fg="green") + f"{result.target.label} (delete key: {result.key})",
                err=True,
            )
        else:
            failed += 1
            click.echo(
                click.style("✗ ", fg="red") + f"{result.target.label}: {result.error}",
                err=True,
            )

    if failed:
        total = len(results)
        click.echo(f"\n{total - failed}/{total} image(s) uploaded.", err=True)
        sys.exit(1)


@main.command()
@click.argument("keys", nargs=-1, required=True)
@click.pass_obj
def delete(config: Config, keys: tuple[str, ...]) -> None:
    """Delete uploaded images or albums.

    KEYS: Delete keys of the form image:HASH or album:HASH, as printed by
    upload.
    """
    try:
        with get_client(config) as client:
            results = client.delete_many(keys)
    except ImgurError as e:
        _fail(str(e))

    if _report_deletions(results):
        sys.exit(1)


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def clear(config: Config, yes: bool) -> None:
    """Delete everything still live in the history log, then remove the log.

    If any deletion fails the log is kept so the clean-up can be retried.
    """
    if not config.history_enabled:
        _fail(f"History is disabled (APP_HISTORY={HISTORY_DISABLED}); nothing to clear")

    if not yes:
        click.confirm(
            "Delete every uploaded item recorded in the history log?",
            default=False,
            abort=True,
            err=True,
        )

    try:
        with get_client(config) as client:
            history = client.history
            results = client.delete_many(history.live_keys())

            failed = _report_deletions(results)
            if failed:
                _fail(
                    f"Clean-up aborted: {failed} item(s) could not be deleted; "
                    f"history log kept at {history.path}"
                )

            if not history.exists():
                click.echo("Nothing to clean up.")
                return

            if not yes and not click.confirm(
                f"Remove history log {history.path}?", default=False, err=True
            ):
                click.echo(f"History log kept at {history.path}", err=True)
                return

            history.remove()
    except ImgurError as e:
        _fail(str(e))

    click.echo(click.style("Clean-up complete.", fg="green"))


@main.command()
@click.pass_obj
def stats(config: Config) -> None:
    """Show the remaining API credits."""
    try:
        with get_client(config) as client:
            credits = client.credits()
    except ImgurError as e:
        _fail(str(e))

    for name, value in credits.fields.items():
        if name == CREDITS_RESET_FIELD and credits.reset_at is not None:
            click.echo(f"{name}: {credits.reset_at:%Y-%m-%d %H:%M:%S} UTC")
        else:
            click.echo(f"{name}: {value}")


if __name__ == "__main__":
    main()
