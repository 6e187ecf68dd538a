"""
Version utility module for version string operations.

This module provides utilities for working with semantic versions,
using the standard packaging.version library for robust version handling.
"""

import re
from typing import Iterable, List

from packaging.version import Version as PackagingVersion, InvalidVersion

from cdnrelease.constants import ARCHIVE_PREFIX, IncrementKind
from cdnrelease.exceptions import InvalidIncrementError, VersionFormatError

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class Version:
    """
    A semantic version representation using packaging.version.

    This class wraps packaging.version.Version to provide increment operations.
    Version format: x.y.z (where x, y, z are non-negative integers)
    """

    def __init__(self, version_string: str):
        """
        Initialize a Version from a string.

        Args:
            version_string: Version string in format "x.y.z"

        Raises:
            VersionFormatError: If version string is invalid
        """
        self._original_string = str(version_string).strip()

        if not _VERSION_PATTERN.match(self._original_string):
            raise VersionFormatError(self._original_string)

        try:
            self._version = PackagingVersion(self._original_string)
        except InvalidVersion as e:
            raise VersionFormatError(self._original_string) from e

    @property
    def major(self) -> int:
        return self._version.major

    @property
    def minor(self) -> int:
        return self._version.minor

    @property
    def patch(self) -> int:
        return self._version.micro

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __repr__(self) -> str:
        return f"Version('{str(self)}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return False
        return self._version == other._version

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version < other._version

    def __le__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version <= other._version

    def __gt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version > other._version

    def __ge__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version >= other._version

    def __hash__(self) -> int:
        return hash(self._version)

    def increment_major(self) -> "Version":
        """Return a new Version with incremented major version."""
        return Version(f"{self.major + 1}.0.0")

    def increment_minor(self) -> "Version":
        """Return a new Version with incremented minor version."""
        return Version(f"{self.major}.{self.minor + 1}.0")

    def increment_patch(self) -> "Version":
        """Return a new Version with incremented patch version."""
        return Version(f"{self.major}.{self.minor}.{self.patch + 1}")


def parse_version(version_string: str) -> Version:
    """
    Parse a version string into a Version object.

    Raises:
        VersionFormatError: If version string is invalid
    """
    return Version(version_string)


def increment_version(version: str, kind: str = "patch") -> str:
    """
    Increment a version string.

    Args:
        version: Current version string
        kind: Which component to increment ("major", "minor", or "patch")

    Returns:
        Incremented version string

    Raises:
        VersionFormatError: If version string is invalid
        InvalidIncrementError: If kind is unknown
    """
    v = Version(version)

    if kind == IncrementKind.major:
        new_v = v.increment_major()
    elif kind == IncrementKind.minor:
        new_v = v.increment_minor()
    elif kind == IncrementKind.patch:
        new_v = v.increment_patch()
    else:
        raise InvalidIncrementError(kind, IncrementKind.values())

    return str(new_v)


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Return version strings in ascending semantic order."""
    return [str(v) for v in sorted(Version(v) for v in versions)]


def version_dir_name(version: str) -> str:
    """Archive directory name for a version, e.g. ``v1.2.3``."""
    return f"{ARCHIVE_PREFIX}{Version(version)}"
