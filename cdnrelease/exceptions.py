"""
Exception hierarchy for cdnrelease.

Every error raised on purpose derives from ReleaseError, grouped in four
families: bad input (ValidationError), missing things (NotFoundError),
failing collaborators (ExternalToolError) and a manifest that ran ahead of
the registry (StateInconsistencyError).
"""

from typing import Iterable, List, Optional


class ReleaseError(Exception):
    """Base exception for all cdnrelease errors."""

    pass


# Validation


class ValidationError(ReleaseError):
    """Raised when caller input is rejected before any side effect."""

    pass


class VersionFormatError(ValidationError):
    """Raised when a version string has an invalid format."""

    def __init__(self, version_string: str, expected_format: str = "x.y.z"):
        self.version_string = version_string
        self.expected_format = expected_format
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            f"Expected format: {expected_format}"
        )


class InvalidEnvironmentError(ValidationError):
    def __init__(self, environment: str, valid: Iterable[str]):
        self.environment = environment
        self.valid = list(valid)
        super().__init__(
            f"Unknown environment '{environment}'. "
            f"Use one of: {', '.join(self.valid)}"
        )


class InvalidIncrementError(ValidationError):
    def __init__(self, kind: str, valid: Iterable[str]):
        self.kind = kind
        self.valid = list(valid)
        super().__init__(
            f"Invalid increment '{kind}'. Use one of: {' | '.join(self.valid)}"
        )


class ConfigError(ValidationError):
    """Raised when the project configuration file cannot be used."""

    pass


class ResetNotConfirmedError(ValidationError):
    """Raised when a reset is requested without explicit confirmation."""

    def __init__(self):
        super().__init__(
            "This will ERASE all builds, versions and archives. "
            "Explicit confirmation is required (--yes)."
        )


# Registry


class RegistryError(ReleaseError):
    """Raised when a registry file exists but cannot be read."""

    pass


# Not found


class NotFoundError(ReleaseError):
    """Raised when a required version, file or credential is missing."""

    pass


class VersionNotFoundError(NotFoundError):
    """Raised when a version has no archive in the given environment."""

    def __init__(self, environment: str, version: str, available: List[str]):
        self.environment = environment
        self.version = version
        self.available = list(available)
        super().__init__(f"Version v{version} not found in {environment} archives")


class ArtifactNotFoundError(NotFoundError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Artifact not found: {path}")


class BuildOutputNotFoundError(NotFoundError):
    def __init__(self, environment: str, path):
        self.environment = environment
        self.path = path
        super().__init__(
            f"No build found in {path}. Run a build first: cdnr build {environment}"
        )


class CredentialsNotFoundError(NotFoundError):
    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(
            f"Missing environment variable: {variable}. Check your .env file."
        )


# External tools


class ExternalToolError(ReleaseError):
    """Raised when the builder or the deployment client fails."""

    pass


class BuildError(ExternalToolError):
    def __init__(self, command: List[str], returncode: Optional[int], detail: str = ""):
        self.command = list(command)
        self.returncode = returncode
        message = f"Build command '{' '.join(self.command)}' failed"
        if returncode is not None:
            message += f" with exit code {returncode}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class DeploymentError(ExternalToolError):
    def __init__(self, target: str, status: Optional[int] = None, detail: str = ""):
        self.target = target
        self.status = status
        message = f"Deployment failed for {target}"
        if status is not None:
            message += f": {status}"
        if detail:
            message += f" {detail}"
        super().__init__(message)


# State


class StateInconsistencyError(ReleaseError):
    """
    Raised when the manifest version was advanced but the build or adopt
    step failed before the registry recorded it.

    Nothing is rolled back; the manifest and the registry disagree until
    an operator reconciles them.
    """

    def __init__(
        self,
        environment: str,
        manifest_version: str,
        registry_version: Optional[str],
        stage: str,
    ):
        self.environment = environment
        self.manifest_version = manifest_version
        self.registry_version = registry_version
        self.stage = stage
        super().__init__(
            f"Manifest version is {manifest_version} but {environment} registry "
            f"still points at {registry_version or 'nothing'} "
            f"(stage '{stage}' failed)"
        )
