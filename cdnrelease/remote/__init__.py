"""
Remote publishing of latest slots to Bunny CDN.

Credentials are read from the environment, optionally seeded from a
``.env`` file in the project tree.
"""

from .bunny import BunnyClient, remote_base
from .credentials import BunnyCredentials, bunny_credentials_from_env
from .deploy import Deployer, collect_deploy_files

__all__ = [
    "BunnyClient",
    "remote_base",
    "BunnyCredentials",
    "bunny_credentials_from_env",
    "Deployer",
    "collect_deploy_files",
]
