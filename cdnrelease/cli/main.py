"""cdnrelease CLI"""

import click

from cdnrelease import __version__
from cdnrelease.cli.build import build
from cdnrelease.cli.deploy import deploy
from cdnrelease.cli.reset import reset
from cdnrelease.cli.restore import restore
from cdnrelease.cli.versions import status, versions
from cdnrelease.config import PROJECT_ENVVAR

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="cdnrelease")
@click.option(
    "-p",
    "--project",
    type=click.Path(exists=True, file_okay=False),
    envvar=PROJECT_ENVVAR,
    default=None,
    help="Project root (defaults to the current directory).",
)
@click.pass_context
def cli(ctx, project):
    """
    Versioned staging/production releases of CDN-hosted bundles.
    """
    ctx.ensure_object(dict)
    ctx.obj["PROJECT"] = project


cli.add_command(build)
cli.add_command(deploy)
cli.add_command(restore)
cli.add_command(reset)
cli.add_command(versions)
cli.add_command(status)

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
