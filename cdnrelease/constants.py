from enum import Enum


STAGING = "staging"
PRODUCTION = "production"

ENVIRONMENTS = (STAGING, PRODUCTION)

# Version written to the manifest by a full reset
BASELINE_VERSION = "0.0.1"

REGISTRY_FILENAME = "versions.json"
ARCHIVE_PREFIX = "v"


class IncrementKind(str, Enum):
    """Semantic version component to bump."""

    patch = "patch"
    minor = "minor"
    major = "major"

    @classmethod
    def values(cls) -> list[str]:
        return [kind.value for kind in cls]


DEFAULT_INCREMENT = IncrementKind.patch.value
