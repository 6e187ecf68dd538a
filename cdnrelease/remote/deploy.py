"""Deploy an environment's latest slot without rebuilding"""

import logging
from typing import Dict, List

from cdnrelease.config import ReleaseConfig
from cdnrelease.exceptions import BuildOutputNotFoundError
from cdnrelease.remote.bunny import BunnyClient
from cdnrelease.utils import collect_files

logger = logging.getLogger(__name__)


def collect_deploy_files(config: ReleaseConfig, environment: str) -> List[str]:
    """
    Files of a latest slot to publish, relative to the slot.

    The script comes first, then the stylesheet if present, then every file
    of the assets subtree.

    Raises:
        BuildOutputNotFoundError: If the slot holds no script bundle
    """
    latest_dir = config.latest_dir(environment)
    if not (latest_dir / config.script_file).is_file():
        raise BuildOutputNotFoundError(environment, latest_dir)

    files = [config.script_file]
    if (latest_dir / config.style_file).is_file():
        files.append(config.style_file)

    assets = latest_dir / config.assets_dir
    if assets.is_dir():
        asset_files = collect_files(assets, latest_dir)
        logger.info(f"Including {len(asset_files)} asset file(s)")
        files.extend(asset_files)
    return files


class Deployer:
    """Publishes latest slots through a BunnyClient."""

    def __init__(self, config: ReleaseConfig, client: BunnyClient):
        self.config = config
        self.client = client

    def deploy(self, environment: str) -> List[Dict]:
        files = collect_deploy_files(self.config, environment)
        logger.info(f"Deploy → {environment.upper()}")
        return self.client.deploy_environment(
            environment, self.config.latest_dir(environment), files
        )
