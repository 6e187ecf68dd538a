"""cli command for building and promoting an environment"""

import click

from cdnrelease.build import BuildOrchestrator, CommandBuilder
from cdnrelease.cli.error_formatting import format_release_error
from cdnrelease.cli.utils.logging import log_error_and_quit, logger
from cdnrelease.cli.utils.project import load_project, make_deployer
from cdnrelease.constants import DEFAULT_INCREMENT, ENVIRONMENTS, IncrementKind
from cdnrelease.exceptions import ReleaseError
from cdnrelease.utils import format_size

from .debug import add_debug_option


@add_debug_option
@click.command("build")
@click.argument("environment", type=click.Choice(ENVIRONMENTS))
@click.argument(
    "increment",
    type=click.Choice(IncrementKind.values()),
    default=DEFAULT_INCREMENT,
    required=False,
)
@click.option(
    "--deploy/--no-deploy",
    default=True,
    show_default=True,
    help="Upload the changed environments to the CDN after archiving.",
)
@click.pass_context
def build(ctx, environment, increment, deploy):
    """Build ENVIRONMENT, archive the new version and deploy it.

    A production build adopts staging's output when staging is ahead,
    otherwise it rebuilds from source.
    """
    try:
        config, manifest = load_project(ctx)
        # Resolve credentials before any state changes
        deployer = make_deployer(config) if deploy else None
        orchestrator = BuildOrchestrator(
            config,
            manifest,
            CommandBuilder.from_config(config),
            deployer=deployer,
        )
        result = orchestrator.run(environment, increment, deploy=deploy)
    except ReleaseError as e:
        log_error_and_quit(logger, format_release_error(e))
        return

    record = result.record
    logger.info(f"Version saved: v{record.version}")
    logger.info(
        f"Sizes: {config.script_file} {format_size(record.sizes.script)}, "
        f"{config.style_file} {format_size(record.sizes.style)}"
    )
    if record.build_time_ms is not None:
        logger.info(f"Build time: {record.build_time_ms}ms")
    if result.mirrored_record is not None:
        logger.info(f"Staging mirrored at v{record.version}")
