"""cli command for deploying an already built environment"""

import click

from cdnrelease.cli.error_formatting import format_release_error
from cdnrelease.cli.utils.logging import log_error_and_quit, logger
from cdnrelease.cli.utils.project import load_project, make_deployer
from cdnrelease.constants import ENVIRONMENTS
from cdnrelease.exceptions import ReleaseError

from .debug import add_debug_option


@add_debug_option
@click.command("deploy")
@click.argument("environment", type=click.Choice(ENVIRONMENTS))
@click.pass_context
def deploy(ctx, environment):
    """Upload the latest build of ENVIRONMENT and purge the CDN cache.

    Does NOT rebuild.
    """
    try:
        config, _ = load_project(ctx)
        make_deployer(config).deploy(environment)
    except ReleaseError as e:
        log_error_and_quit(logger, format_release_error(e))
