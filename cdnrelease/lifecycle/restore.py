"""Roll an environment's latest slot back to an archived version"""

import logging
from typing import List, Optional

from cdnrelease.archive import ArchiveManager
from cdnrelease.config import ReleaseConfig, validate_environment
from cdnrelease.constants import PRODUCTION, STAGING
from cdnrelease.exceptions import ArtifactNotFoundError, VersionNotFoundError
from cdnrelease.utils import copy_or_remove
from cdnrelease.versioning.store import VersionStore
from cdnrelease.versioning.version import Version

logger = logging.getLogger(__name__)

# Environments that follow a restore of the key environment
CASCADES = {PRODUCTION: [STAGING]}


class RestoreManager:
    """
    Restores archived versions into latest slots.

    Only the versioned files are replaced; the assets subtree of the latest
    slot is left as is. Restoring never mints a new version.
    """

    def __init__(
        self,
        config: ReleaseConfig,
        store: Optional[VersionStore] = None,
        archive_manager: Optional[ArchiveManager] = None,
    ):
        self.config = config
        self.store = store if store is not None else VersionStore(config)
        self.archive_manager = (
            archive_manager
            if archive_manager is not None
            else ArchiveManager(config, store=self.store)
        )

    def restore(self, environment: str, version: str) -> List[str]:
        """
        Restore ``version`` into the latest slot of ``environment``.

        Restoring production cascades the same version into staging.

        Returns:
            The environments whose latest slot changed, restored one first

        Raises:
            VersionNotFoundError: If ``environment`` has no archive of
                ``version``; carries the sorted archived versions
            ArtifactNotFoundError: If the archive lacks the script bundle;
                nothing is changed
        """
        validate_environment(environment)
        version = str(Version(version))

        state = self.store.load(environment)
        if not self.archive_manager.has_archive(environment, version):
            raise VersionNotFoundError(environment, version, state.sorted_versions())

        archived_script = (
            self.config.version_dir(environment, version) / self.config.script_file
        )
        if not archived_script.is_file():
            raise ArtifactNotFoundError(archived_script)

        self._copy_versioned_files(environment, environment, version)
        state.latest = version
        self.store.save(environment, state)
        logger.info(f"Restored v{version} → {self.config.latest_dir(environment)}")

        changed = [environment]
        for dependent in CASCADES.get(environment, []):
            self.archive_manager.replicate(environment, dependent, version)
            self._copy_versioned_files(environment, dependent, version)
            logger.info(f"Cascaded v{version} into {dependent}")
            changed.append(dependent)

        return changed

    def _copy_versioned_files(self, source: str, target: str, version: str) -> None:
        archive_dir = self.config.version_dir(source, version)
        latest_dir = self.config.latest_dir(target)
        latest_dir.mkdir(parents=True, exist_ok=True)
        for name in self.config.versioned_files:
            copy_or_remove(archive_dir / name, latest_dir / name)
