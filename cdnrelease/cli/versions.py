"""cli commands for inspecting archived versions and environment state"""

import click
from rich.console import Console
from rich.table import Table

from cdnrelease.cli.error_formatting import format_release_error
from cdnrelease.cli.utils.logging import log_error_and_quit, logger
from cdnrelease.cli.utils.project import load_project
from cdnrelease.constants import ENVIRONMENTS, PRODUCTION, STAGING
from cdnrelease.exceptions import ReleaseError
from cdnrelease.utils import format_size
from cdnrelease.versioning.store import VersionStore

from .debug import add_debug_option


@add_debug_option
@click.command("versions")
@click.argument("environment", type=click.Choice(ENVIRONMENTS))
@click.pass_context
def versions(ctx, environment):
    """List the archived versions of ENVIRONMENT."""
    try:
        config, _ = load_project(ctx)
        state = VersionStore(config).load(environment)
    except ReleaseError as e:
        log_error_and_quit(logger, format_release_error(e))
        return

    if not state.versions:
        click.echo(f"No {environment} versions archived.")
        return

    table = Table(title=f"{environment} versions")
    table.add_column("Version")
    table.add_column("Date")
    table.add_column("Commit")
    table.add_column("Branch")
    table.add_column(config.script_file, justify="right")
    table.add_column(config.style_file, justify="right")
    table.add_column("Source")

    for version in state.sorted_versions():
        record = state.versions[version]
        label = f"{version} *" if version == state.latest else version
        table.add_row(
            label,
            record.timestamp.strftime("%Y-%m-%d %H:%M"),
            record.commit,
            record.branch,
            format_size(record.sizes.script),
            format_size(record.sizes.style),
            record.adopted_from or "build",
        )

    Console(width=120).print(table)


@add_debug_option
@click.command("status")
@click.pass_context
def status(ctx):
    """Show the manifest version and the latest version of each environment."""
    try:
        config, manifest = load_project(ctx)
        store = VersionStore(config)
        states = {env: store.load(env) for env in ENVIRONMENTS}
    except ReleaseError as e:
        log_error_and_quit(logger, format_release_error(e))
        return

    click.echo(f"manifest    {manifest.version}")
    for env in (STAGING, PRODUCTION):
        click.echo(f"{env:<11} {states[env].latest or '-'}")

    archived = set()
    for state in states.values():
        archived.update(state.versions)
    if archived and manifest.version not in archived:
        logger.warning(
            f"Manifest version {manifest.version} has no archive in any environment; "
            "a build may have failed after the version bump."
        )
