"""``--debug/--no-debug`` switch shared by the cdnr group and its commands"""

import click

from .utils.logging import configure_logging

DEBUG_KEY = "DEBUG"


def add_debug_option(cmd: click.Command) -> click.Command:
    """Prepend an eager ``--debug/--no-debug`` option to a click command."""
    if any(param.name == "debug" for param in cmd.params):
        return cmd
    cmd.params.insert(
        0,
        click.Option(
            ["--debug/--no-debug"],
            is_eager=True,
            expose_value=False,
            callback=_set_debug,
            help="Log every pipeline stage and registry write.",
        ),
    )
    return cmd


def _set_debug(ctx: click.Context, param: click.Parameter, value: bool) -> bool:
    """Store the flag on the root context and reconfigure logging.

    ``cdnr --debug build staging`` keeps debug on even though the build
    command sees its own ``--no-debug`` default; only the group level can
    turn it off again.
    """
    root_obj = ctx.find_root().ensure_object(dict)
    at_group_level = ctx.parent is None

    if value or at_group_level:
        root_obj[DEBUG_KEY] = value
    root_obj.setdefault(DEBUG_KEY, False)

    configure_logging(root_obj[DEBUG_KEY])
    return root_obj[DEBUG_KEY]
