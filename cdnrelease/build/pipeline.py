"""
Build pipeline: decide, produce, archive, mirror, deploy.

The pipeline is an ordered list of named stages sharing one BuildContext.
The first stage that raises stops the run. Once the manifest has been
bumped, a failure before the archive is committed leaves the manifest ahead
of the registry; that case is logged distinctly and surfaced as a
StateInconsistencyError. Nothing is rolled back.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from cdnrelease.archive import ArchiveManager
from cdnrelease.build.builder import Builder
from cdnrelease.config import ReleaseConfig, validate_environment
from cdnrelease.constants import DEFAULT_INCREMENT, PRODUCTION, STAGING
from cdnrelease.exceptions import StateInconsistencyError
from cdnrelease.promotion.policy import PromotionAction, PromotionDecision, decide
from cdnrelease.remote.deploy import Deployer
from cdnrelease.utils import replace_tree
from cdnrelease.versioning.manifest import PackageManifest
from cdnrelease.versioning.store import VersionRecord, VersionStore

logger = logging.getLogger(__name__)

STAGE_DECIDE = "decide"
STAGE_BUMP = "bump-manifest"
STAGE_PRODUCE = "produce"
STAGE_ARCHIVE = "archive"
STAGE_MIRROR = "mirror"
STAGE_DEPLOY = "deploy"


@dataclass
class BuildContext:
    """State shared by the stages of one pipeline run."""

    environment: str
    increment: str
    manifest: PackageManifest
    deploy: bool = True
    decision: Optional[PromotionDecision] = None
    previous_manifest_version: Optional[str] = None
    build_time_ms: Optional[int] = None
    record: Optional[VersionRecord] = None
    mirrored_record: Optional[VersionRecord] = None
    changed_environments: List[str] = field(default_factory=list)
    deployed: List[str] = field(default_factory=list)
    completed_stages: List[str] = field(default_factory=list)

    @property
    def manifest_ahead(self) -> bool:
        """True after a version-changing manifest bump until the archive commits."""
        return (
            STAGE_BUMP in self.completed_stages
            and STAGE_ARCHIVE not in self.completed_stages
            and self.previous_manifest_version != self.decision.next_version
        )


@dataclass(frozen=True)
class Stage:
    name: str
    run: Callable[[BuildContext], None]


class BuildOrchestrator:
    """Top-level driver of a build request."""

    def __init__(
        self,
        config: ReleaseConfig,
        manifest: PackageManifest,
        builder: Builder,
        store: Optional[VersionStore] = None,
        archive_manager: Optional[ArchiveManager] = None,
        deployer: Optional[Deployer] = None,
    ):
        self.config = config
        self.manifest = manifest
        self.builder = builder
        self.store = store if store is not None else VersionStore(config)
        self.archive_manager = (
            archive_manager
            if archive_manager is not None
            else ArchiveManager(config, store=self.store)
        )
        self.deployer = deployer

    @property
    def stages(self) -> List[Stage]:
        return [
            Stage(STAGE_DECIDE, self._decide),
            Stage(STAGE_BUMP, self._bump_manifest),
            Stage(STAGE_PRODUCE, self._produce),
            Stage(STAGE_ARCHIVE, self._archive),
            Stage(STAGE_MIRROR, self._mirror),
            Stage(STAGE_DEPLOY, self._deploy),
        ]

    def run(
        self,
        environment: str,
        increment: str = DEFAULT_INCREMENT,
        deploy: bool = True,
    ) -> BuildContext:
        """
        Run every stage for one build request.

        Returns:
            The BuildContext of the finished run

        Raises:
            StateInconsistencyError: If producing or archiving failed after
                the manifest was bumped
            ReleaseError: Any other failure of a stage, unchanged
        """
        validate_environment(environment)
        ctx = BuildContext(
            environment=environment,
            increment=increment,
            manifest=self.manifest,
            deploy=deploy,
        )

        for stage in self.stages:
            logger.debug(f"Stage '{stage.name}' started")
            try:
                stage.run(ctx)
            except Exception as e:
                if ctx.manifest_ahead:
                    raise self._inconsistency(ctx, stage) from e
                raise
            ctx.completed_stages.append(stage.name)

        logger.info(f"Build finished for {environment}: v{ctx.decision.next_version}")
        return ctx

    def _inconsistency(
        self, ctx: BuildContext, stage: Stage
    ) -> StateInconsistencyError:
        registry_version = self.store.latest(ctx.environment)
        error = StateInconsistencyError(
            ctx.environment, ctx.manifest.version, registry_version, stage.name
        )
        logger.error(
            f"STATE INCONSISTENCY: manifest is at {ctx.manifest.version} "
            f"(was {ctx.previous_manifest_version}) but the {ctx.environment} "
            f"registry points at {registry_version or 'nothing'}. "
            "Reconcile manually, e.g. restore the manifest version or rebuild."
        )
        return error

    def _decide(self, ctx: BuildContext) -> None:
        staging_latest = self.store.latest(STAGING)
        production_latest = self.store.latest(PRODUCTION)
        has_staging_artifacts = (
            self.config.latest_dir(STAGING) / self.config.script_file
        ).is_file()

        ctx.decision = decide(
            ctx.environment,
            ctx.increment,
            ctx.manifest.version,
            staging_latest,
            production_latest,
            has_staging_artifacts,
        )
        logger.info(f"Environment → {ctx.environment}: {ctx.decision.describe()}")

    def _bump_manifest(self, ctx: BuildContext) -> None:
        ctx.previous_manifest_version = ctx.manifest.set_version(
            ctx.decision.next_version
        )
        logger.info(
            f"Version bumped → v{ctx.decision.next_version} "
            f"(was {ctx.previous_manifest_version})"
        )

    def _produce(self, ctx: BuildContext) -> None:
        target = self.config.latest_dir(ctx.environment)
        if ctx.decision.action is PromotionAction.ADOPT:
            source = self.config.latest_dir(STAGING)
            replace_tree(source, target)
            logger.info(f"Adopted staging output {source} → {target}")
            return

        result = self.builder.build(target)
        ctx.build_time_ms = result.duration_ms

    def _archive(self, ctx: BuildContext) -> None:
        adopted_from = None
        if ctx.decision.action is PromotionAction.ADOPT:
            adopted_from = STAGING
        ctx.record = self.archive_manager.archive(
            ctx.environment,
            ctx.decision.next_version,
            build_time_ms=ctx.build_time_ms,
            adopted_from=adopted_from,
        )
        ctx.changed_environments.append(ctx.environment)

    def _mirror(self, ctx: BuildContext) -> None:
        if not ctx.decision.mirror_to_staging:
            return
        replace_tree(
            self.config.latest_dir(PRODUCTION), self.config.latest_dir(STAGING)
        )
        ctx.mirrored_record = self.archive_manager.replicate(
            PRODUCTION, STAGING, ctx.decision.next_version
        )
        ctx.changed_environments.append(STAGING)

    def _deploy(self, ctx: BuildContext) -> None:
        if not ctx.deploy or self.deployer is None:
            logger.info("Skipping deploy.")
            return
        for environment in ctx.changed_environments:
            self.deployer.deploy(environment)
            ctx.deployed.append(environment)
