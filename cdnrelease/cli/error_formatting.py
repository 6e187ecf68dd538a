"""Error formatting for CLI output."""

import click

from cdnrelease.exceptions import (
    ReleaseError,
    StateInconsistencyError,
    VersionNotFoundError,
)


def format_release_error(error: ReleaseError) -> str:
    """Format a ReleaseError to present useful information to the user.

    Version lookups list the versions that do exist, so the user can retry
    with a valid one.

    Example output:
        [ERROR] Version v9.9.9 not found in production archives
          Available production versions:
            • 1.0.1
            • 1.1.0
    """
    message_parts = [click.style("[ERROR]", fg="red", bold=True) + f" {error}"]

    if isinstance(error, VersionNotFoundError):
        if error.available:
            message_parts.append(f"  Available {error.environment} versions:")
            message_parts.extend(f"    • {v}" for v in error.available)
        else:
            message_parts.append("  No versions available.")

    if isinstance(error, StateInconsistencyError) and error.__cause__ is not None:
        message_parts.append(f"  Cause: {error.__cause__}")

    return "\n".join(message_parts)
