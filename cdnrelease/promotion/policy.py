"""
Promotion policy: which version comes next and where its artifacts come from.

``decide`` is a pure function of the manifest version, both environments'
latest pointers and whether staging has built output. It never touches the
filesystem; the build pipeline executes the decision.

Production requests are partitioned into exactly three cases, checked in
order:

1. ``ADOPT``: staging has built output and a version strictly greater than
   production's (or production has none). Production takes staging's bytes
   and version, nothing is rebuilt.
2. ``REBUILD_AND_MIRROR``: staging has a version equal to production's.
   Production rebuilds at the next manifest version and staging is mirrored
   to the identical output and version.
3. ``REBUILD``: anything else. Production rebuilds alone from its own last
   version, or from the manifest version when it has none.

Staging requests always rebuild at the next manifest version.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cdnrelease.config import validate_environment
from cdnrelease.constants import STAGING, IncrementKind
from cdnrelease.exceptions import InvalidIncrementError
from cdnrelease.versioning.version import Version, increment_version


class PromotionAction(str, Enum):
    REBUILD = "rebuild"
    ADOPT = "adopt"
    REBUILD_AND_MIRROR = "rebuild_and_mirror"


@dataclass(frozen=True)
class PromotionDecision:
    """Outcome of the promotion policy for one build request."""

    environment: str
    action: PromotionAction
    next_version: str
    increment: str

    @property
    def source(self) -> str:
        """``adopt`` when artifacts are copied, ``rebuild`` otherwise."""
        if self.action is PromotionAction.ADOPT:
            return "adopt"
        return "rebuild"

    @property
    def mirror_to_staging(self) -> bool:
        return self.action is PromotionAction.REBUILD_AND_MIRROR

    def describe(self) -> str:
        if self.action is PromotionAction.ADOPT:
            return f"adopt staging build v{self.next_version} (no rebuild)"
        if self.action is PromotionAction.REBUILD_AND_MIRROR:
            return f"rebuild v{self.next_version} and mirror it to staging"
        return f"rebuild v{self.next_version} ({self.increment})"


def decide(
    environment: str,
    increment: str,
    current_version: str,
    staging_latest: Optional[str],
    production_latest: Optional[str],
    has_staging_artifacts: bool,
) -> PromotionDecision:
    """
    Decide the next version and artifact source of a build request.

    Args:
        environment: Requested environment
        increment: "patch", "minor" or "major"
        current_version: Version held by the manifest
        staging_latest: Staging's latest pointer, if any
        production_latest: Production's latest pointer, if any
        has_staging_artifacts: Whether staging's latest slot holds a script

    Returns:
        The PromotionDecision

    Raises:
        InvalidEnvironmentError: If the environment is unknown
        InvalidIncrementError: If the increment kind is unknown
        VersionFormatError: If any version is malformed
    """
    validate_environment(environment)
    if increment not in IncrementKind.values():
        raise InvalidIncrementError(increment, IncrementKind.values())

    current = Version(current_version)
    staging = Version(staging_latest) if staging_latest is not None else None
    production = Version(production_latest) if production_latest is not None else None

    if environment == STAGING:
        return PromotionDecision(
            environment,
            PromotionAction.REBUILD,
            increment_version(str(current), increment),
            increment,
        )

    if (
        has_staging_artifacts
        and staging is not None
        and (production is None or staging > production)
    ):
        return PromotionDecision(
            environment, PromotionAction.ADOPT, str(staging), increment
        )

    if staging is not None and staging == production:
        return PromotionDecision(
            environment,
            PromotionAction.REBUILD_AND_MIRROR,
            increment_version(str(current), increment),
            increment,
        )

    base = production if production is not None else current
    return PromotionDecision(
        environment,
        PromotionAction.REBUILD,
        increment_version(str(base), increment),
        increment,
    )
