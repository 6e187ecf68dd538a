"""cli command for wiping all environments"""

import click

from cdnrelease.cli.error_formatting import format_release_error
from cdnrelease.cli.utils.logging import log_error_and_quit, logger
from cdnrelease.cli.utils.project import load_project
from cdnrelease.exceptions import ReleaseError
from cdnrelease.lifecycle import ResetManager

from .debug import add_debug_option


@add_debug_option
@click.command("reset")
@click.option(
    "-y",
    "--yes",
    is_flag=True,
    default=False,
    help="Confirm that all builds, versions and archives are erased.",
)
@click.pass_context
def reset(ctx, yes):
    """Erase every build and archive and reset the version to 0.0.1."""
    try:
        config, manifest = load_project(ctx)
        ResetManager(config, manifest).reset(confirmed=yes)
    except ReleaseError as e:
        log_error_and_quit(logger, format_release_error(e))
        return

    logger.info("RESET COMPLETE. Next step: run a staging or production build.")
