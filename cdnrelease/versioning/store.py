"""
Per-environment version registry.

Each environment keeps one JSON registry file::

    {
      "latest": "1.2.0",
      "versions": {
        "1.2.0": { ...VersionRecord... }
      }
    }

``save`` always rewrites the whole file (last writer wins). Callers
read-modify-write and are expected to run one at a time per environment.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cdnrelease.exceptions import RegistryError
from cdnrelease.versioning.version import Version, sort_versions

if TYPE_CHECKING:
    from cdnrelease.config import ReleaseConfig

logger = logging.getLogger(__name__)


class ArtifactSizes(BaseModel):
    """Sizes in bytes of the two versioned files."""

    model_config = ConfigDict(frozen=True)

    script: int
    style: Optional[int] = None


class VersionRecord(BaseModel):
    """Immutable metadata of one archived version."""

    model_config = ConfigDict(frozen=True)

    version: str
    environment: str
    timestamp: datetime
    commit: str
    branch: str
    sizes: ArtifactSizes
    script_checksum: str = Field(..., description="SHA-1 of the script bundle")
    build_time_ms: Optional[int] = None
    adopted_from: Optional[str] = None

    def for_environment(self, environment: str) -> "VersionRecord":
        """Duplicate of this record filed under another environment."""
        return self.model_copy(
            update={"environment": environment, "adopted_from": self.environment}
        )


class EnvironmentState(BaseModel):
    """Latest pointer plus archived versions of one environment."""

    latest: Optional[str] = None
    versions: Dict[str, VersionRecord] = Field(default_factory=dict)

    def sorted_versions(self) -> List[str]:
        return sort_versions(self.versions.keys())

    def record(self, record: VersionRecord) -> None:
        """Insert or overwrite ``record`` and point latest at it."""
        self.versions[record.version] = record
        self.latest = record.version

    def is_consistent(self) -> bool:
        """True when latest is empty or names an archived version."""
        return self.latest is None or self.latest in self.versions


class VersionStore:
    """Reads and writes the registry files of a project."""

    def __init__(self, config: "ReleaseConfig"):
        self.config = config

    def path(self, environment: str) -> Path:
        return self.config.registry_file(environment)

    def load(self, environment: str) -> EnvironmentState:
        """
        Load the state of an environment.

        A missing registry file is a fresh environment, not an error.

        Raises:
            RegistryError: If the file exists but is not a valid registry
        """
        registry = self.path(environment)
        if not registry.exists():
            return EnvironmentState()

        try:
            with open(registry, "r") as f:
                data = json.load(f)
            state = EnvironmentState.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise RegistryError(f"Invalid registry {registry}: {e}") from e

        if state.latest is not None:
            Version(state.latest)
        return state

    def save(self, environment: str, state: EnvironmentState) -> None:
        """Overwrite the registry file of an environment."""
        registry = self.path(environment)
        registry.parent.mkdir(parents=True, exist_ok=True)
        with open(registry, "w") as f:
            json.dump(state.model_dump(mode="json"), f, indent=2)
            f.write("\n")
        logger.debug(f"Registry {registry} saved (latest={state.latest})")

    def latest(self, environment: str) -> Optional[str]:
        return self.load(environment).latest

    def initialize(self, environment: str) -> None:
        """Write an empty registry."""
        self.save(environment, EnvironmentState())
