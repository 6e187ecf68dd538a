"""Project configuration and on-disk layout for a release project"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cdnrelease.constants import ENVIRONMENTS, REGISTRY_FILENAME
from cdnrelease.exceptions import ConfigError, InvalidEnvironmentError
from cdnrelease.versioning.version import version_dir_name

logger = logging.getLogger(__name__)

APP_NAME = "cdnrelease"
CONFIG_FILENAME = f"{APP_NAME}.yaml"
PROJECT_ENVVAR = "CDNR_PROJECT"


def validate_environment(environment: str) -> str:
    """Return the environment name or raise InvalidEnvironmentError."""
    if environment not in ENVIRONMENTS:
        raise InvalidEnvironmentError(environment, ENVIRONMENTS)
    return environment


class ReleaseConfig(BaseModel):
    """
    Configuration of a release project.

    Every path field is relative to ``root`` unless given as absolute.
    """

    model_config = ConfigDict(extra="forbid")

    root: Path = Field(default_factory=Path.cwd, description="Project root")
    dist_dir: Path = Field(Path("dist"), description="Build-output tree")
    manifest: Path = Field(
        Path("package.json"), description="Manifest holding the current version"
    )
    script_file: str = Field("app.js", description="Versioned script bundle")
    style_file: str = Field("app.css", description="Versioned stylesheet bundle")
    assets_dir: str = Field("assets", description="Unversioned assets subtree")
    build_command: List[str] = Field(
        default_factory=lambda: ["npx", "vite", "build"],
        description="Builder invocation",
    )
    outdir_env: str = Field(
        "VITE_BUILD_OUTDIR",
        description="Variable through which the builder receives its output dir",
    )
    cdn_timeout: float = Field(60.0, description="HTTP timeout (seconds)")
    max_workers: int = Field(8, description="Parallel uploads and purges")

    @field_validator("build_command")
    @classmethod
    def validate_build_command(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("build_command must not be empty")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    @classmethod
    def from_yaml(cls, root: Union[str, Path, None] = None) -> "ReleaseConfig":
        """
        Load the configuration of the project rooted at ``root``.

        Reads ``cdnrelease.yaml`` from the root when present; otherwise
        every field keeps its default.

        Raises:
            ConfigError: If the file is not valid YAML or has invalid fields
        """
        root_path = Path(root) if root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        data = {}
        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse {config_file}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{config_file} must contain a mapping")
            logger.debug(f"Loaded configuration from {config_file}")

        data["root"] = root_path
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    @property
    def dist_path(self) -> Path:
        return self._resolve(self.dist_dir)

    @property
    def manifest_path(self) -> Path:
        return self._resolve(self.manifest)

    def env_root(self, environment: str) -> Path:
        return self.dist_path / validate_environment(environment)

    def latest_dir(self, environment: str) -> Path:
        """The mutable latest slot of an environment."""
        return self.env_root(environment) / "latest"

    def versions_dir(self, environment: str) -> Path:
        return self.env_root(environment) / "versions"

    def version_dir(self, environment: str, version: str) -> Path:
        """The immutable archive directory of one version."""
        return self.versions_dir(environment) / version_dir_name(version)

    def registry_file(self, environment: str) -> Path:
        return self.versions_dir(environment) / REGISTRY_FILENAME

    @property
    def versioned_files(self) -> List[str]:
        """Files copied into archives, script first."""
        return [self.script_file, self.style_file]


def resolve_project_root(project: Optional[str] = None) -> Path:
    """Project root from an explicit path, ``CDNR_PROJECT`` or the cwd."""
    if project:
        return Path(project).resolve()
    env_root = os.environ.get(PROJECT_ENVVAR)
    if env_root:
        return Path(env_root).resolve()
    return Path.cwd()
