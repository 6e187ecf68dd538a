"""
Versioning module for cdnrelease.

All version handling lives here:

- version.py: semantic ``Version`` with comparison and increments
- manifest.py: ``PackageManifest``, the owner of the current version
- store.py: ``VersionStore``, the per-environment registry of archived versions
- git.py: ``GitInfoProvider``, commit and branch stamps for version records
"""

from .version import (
    Version,
    parse_version,
    increment_version,
    sort_versions,
)
from .manifest import PackageManifest
from .store import VersionStore, EnvironmentState, VersionRecord, ArtifactSizes
from .git import GitInfoProvider

__all__ = [
    "Version",
    "parse_version",
    "increment_version",
    "sort_versions",
    "PackageManifest",
    "VersionStore",
    "EnvironmentState",
    "VersionRecord",
    "ArtifactSizes",
    "GitInfoProvider",
]
