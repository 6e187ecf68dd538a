"""
Package manifest holding the project's current version.

The manifest is the single owner of the "current version" that seeds every
increment. It is loaded once and passed by reference through the build
pipeline, so tests can start from any version without touching real files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from cdnrelease.exceptions import ConfigError
from cdnrelease.versioning.version import Version

logger = logging.getLogger(__name__)


class PackageManifest:
    """
    In-memory view of a ``package.json``-style manifest.

    Only the ``version`` field is owned here; all other keys are preserved
    verbatim on save.
    """

    def __init__(self, data: Dict[str, Any], path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        self._data = dict(data)
        # Validate eagerly so a broken manifest fails before any build step
        Version(self.version)

    @classmethod
    def load(cls, path: Path) -> "PackageManifest":
        """
        Read a manifest file.

        Raises:
            ConfigError: If the file is missing, unreadable or has no version
        """
        path = Path(path)
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Manifest not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse manifest {path}: {e}") from e

        if not isinstance(data, dict) or "version" not in data:
            raise ConfigError(f"Manifest {path} has no version field")
        return cls(data, path=path)

    @classmethod
    def in_memory(cls, version: str) -> "PackageManifest":
        """A manifest that is never written to disk."""
        return cls({"version": version})

    @property
    def version(self) -> str:
        return str(self._data["version"])

    @version.setter
    def version(self, value: str) -> None:
        self._data["version"] = str(Version(value))

    def save(self) -> None:
        """Write the manifest back; a no-op for in-memory manifests."""
        if self.path is None:
            return
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
            f.write("\n")
        logger.debug(f"Manifest {self.path} saved at version {self.version}")

    def set_version(self, value: str) -> str:
        """Set and persist the version, returning the previous one."""
        previous = self.version
        self.version = value
        self.save()
        return previous
