"""cli command for restoring an archived version"""

import click

from cdnrelease.cli.error_formatting import format_release_error
from cdnrelease.cli.utils.logging import log_error_and_quit, logger
from cdnrelease.cli.utils.project import load_project, make_deployer
from cdnrelease.constants import ENVIRONMENTS
from cdnrelease.exceptions import ReleaseError, VersionFormatError
from cdnrelease.lifecycle import RestoreManager
from cdnrelease.versioning.version import parse_version

from .debug import add_debug_option


def _validate_version(ctx, param, value):
    try:
        return str(parse_version(value.lstrip("v")))
    except VersionFormatError as e:
        raise click.BadParameter(str(e))


@add_debug_option
@click.command("restore")
@click.argument("environment", type=click.Choice(ENVIRONMENTS))
@click.argument("version", callback=_validate_version)
@click.option(
    "--deploy/--no-deploy",
    default=False,
    show_default=True,
    help="Upload the restored environments to the CDN.",
)
@click.pass_context
def restore(ctx, environment, version, deploy):
    """Restore VERSION into the latest slot of ENVIRONMENT.

    Restoring production also restores staging to the same version.
    """
    try:
        config, _ = load_project(ctx)
        deployer = make_deployer(config) if deploy else None
        changed = RestoreManager(config).restore(environment, version)
        if deployer is not None:
            for env in changed:
                deployer.deploy(env)
    except ReleaseError as e:
        log_error_and_quit(logger, format_release_error(e))
        return

    logger.info("Restore complete.")
    if not deploy:
        logger.info(f"Run `cdnr deploy {environment}` to push to the CDN.")
