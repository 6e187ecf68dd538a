"""Full reset of every environment"""

import logging
import shutil
from typing import Optional

from cdnrelease.config import ReleaseConfig
from cdnrelease.constants import BASELINE_VERSION, ENVIRONMENTS
from cdnrelease.exceptions import ResetNotConfirmedError
from cdnrelease.versioning.manifest import PackageManifest
from cdnrelease.versioning.store import VersionStore

logger = logging.getLogger(__name__)


class ResetManager:
    """
    Destroys all build output and archived history.

    The reset is all-or-nothing across environments and refuses to run
    without explicit confirmation.
    """

    def __init__(
        self,
        config: ReleaseConfig,
        manifest: PackageManifest,
        store: Optional[VersionStore] = None,
    ):
        self.config = config
        self.manifest = manifest
        self.store = store if store is not None else VersionStore(config)

    def reset(self, confirmed: bool) -> None:
        """
        Wipe the build-output tree and reinitialize empty registries.

        Raises:
            ResetNotConfirmedError: If ``confirmed`` is false; nothing is touched
        """
        if not confirmed:
            raise ResetNotConfirmedError()

        dist = self.config.dist_path
        if dist.exists():
            shutil.rmtree(dist)
            logger.info(f"Deleted {dist}")
        else:
            logger.info(f"{dist} already removed")

        self.manifest.set_version(BASELINE_VERSION)
        logger.info(f"Manifest version reset → {BASELINE_VERSION}")

        for environment in ENVIRONMENTS:
            self.config.latest_dir(environment).mkdir(parents=True, exist_ok=True)
            self.store.initialize(environment)

        logger.info("Fresh build-output structure recreated.")
