"""
Snapshots of an environment's latest slot.

An archive holds only the two versioned files (script and stylesheet). The
assets subtree stays in the latest slot and is never archived.
"""

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from cdnrelease.config import ReleaseConfig, validate_environment
from cdnrelease.exceptions import ArtifactNotFoundError, VersionNotFoundError
from cdnrelease.utils import copy_or_remove, sha1_checksum
from cdnrelease.versioning.git import GitInfoProvider
from cdnrelease.versioning.store import ArtifactSizes, VersionRecord, VersionStore
from cdnrelease.versioning.version import Version

logger = logging.getLogger(__name__)


class ArchiveManager:
    """Archives latest outputs and records them in the version registry."""

    def __init__(
        self,
        config: ReleaseConfig,
        store: Optional[VersionStore] = None,
        git_info: Optional[GitInfoProvider] = None,
    ):
        self.config = config
        self.store = store if store is not None else VersionStore(config)
        self.git_info = (
            git_info if git_info is not None else GitInfoProvider(config.root)
        )

    def archive(
        self,
        environment: str,
        version: str,
        latest_dir: Optional[Path] = None,
        build_time_ms: Optional[int] = None,
        adopted_from: Optional[str] = None,
    ) -> VersionRecord:
        """
        Snapshot the versioned files of ``latest_dir`` as ``version``.

        Archiving an existing version overwrites both its files and its
        record.

        Args:
            environment: Environment that owns the archive
            version: Version key of the snapshot
            latest_dir: Directory to snapshot (defaults to the latest slot)
            build_time_ms: Build duration to record, if rebuilt from source
            adopted_from: Environment the artifacts came from, if not built

        Returns:
            The stored VersionRecord

        Raises:
            ArtifactNotFoundError: If the script bundle is missing
        """
        validate_environment(environment)
        version = str(Version(version))
        if latest_dir is None:
            latest_dir = self.config.latest_dir(environment)
        latest_dir = Path(latest_dir)

        script = latest_dir / self.config.script_file
        style = latest_dir / self.config.style_file
        if not script.is_file():
            raise ArtifactNotFoundError(script)

        version_dir = self.config.version_dir(environment, version)
        if version_dir.exists():
            logger.debug(f"Overwriting existing archive {version_dir}")
            shutil.rmtree(version_dir)
        version_dir.mkdir(parents=True)

        for name in self.config.versioned_files:
            copy_or_remove(latest_dir / name, version_dir / name)

        record = VersionRecord(
            version=version,
            environment=environment,
            timestamp=datetime.now(timezone.utc),
            commit=self.git_info.commit(),
            branch=self.git_info.branch(),
            sizes=ArtifactSizes(
                script=script.stat().st_size,
                style=style.stat().st_size if style.is_file() else None,
            ),
            script_checksum=sha1_checksum(script),
            build_time_ms=build_time_ms,
            adopted_from=adopted_from,
        )

        state = self.store.load(environment)
        state.record(record)
        self.store.save(environment, state)

        logger.info(f"Version saved: v{version} ({environment})")
        logger.debug(f"Archive: {version_dir}")
        return record

    def replicate(self, source: str, target: str, version: str) -> VersionRecord:
        """
        Copy an archived version of ``source`` into ``target``.

        The archived files are copied, the record is duplicated under
        ``target`` and ``target``'s latest pointer is moved to ``version``
        in the same registry write.

        Raises:
            VersionNotFoundError: If ``source`` has no such archive
            ArtifactNotFoundError: If the archive lacks the script bundle
        """
        validate_environment(source)
        validate_environment(target)
        version = str(Version(version))

        source_state = self.store.load(source)
        source_dir = self.config.version_dir(source, version)
        if version not in source_state.versions or not source_dir.is_dir():
            raise VersionNotFoundError(
                source, version, source_state.sorted_versions()
            )
        source_script = source_dir / self.config.script_file
        if not source_script.is_file():
            raise ArtifactNotFoundError(source_script)

        target_dir = self.config.version_dir(target, version)
        if target_dir.exists():
            shutil.rmtree(target_dir)
        target_dir.mkdir(parents=True)
        for name in self.config.versioned_files:
            copy_or_remove(source_dir / name, target_dir / name)

        record = source_state.versions[version].for_environment(target)
        target_state = self.store.load(target)
        target_state.record(record)
        self.store.save(target, target_state)

        logger.info(f"Version v{version} replicated {source} → {target}")
        return record

    def list_versions(self, environment: str) -> List[str]:
        """Archived version keys of an environment, ascending."""
        return self.store.load(environment).sorted_versions()

    def has_archive(self, environment: str, version: str) -> bool:
        """True when both the registry key and the archive directory exist."""
        state = self.store.load(environment)
        return (
            version in state.versions
            and self.config.version_dir(environment, version).is_dir()
        )
