"""Project loading shared by CLI commands"""

from typing import Tuple

import click

from cdnrelease.config import ReleaseConfig, resolve_project_root
from cdnrelease.remote import BunnyClient, Deployer, bunny_credentials_from_env
from cdnrelease.versioning.manifest import PackageManifest


def load_project(ctx: click.Context) -> Tuple[ReleaseConfig, PackageManifest]:
    """
    Configuration and manifest of the project selected with ``--project``.

    Raises:
        ConfigError: If the configuration or the manifest is invalid
    """
    root_obj = ctx.find_root().obj or {}
    project = root_obj.get("PROJECT")
    config = ReleaseConfig.from_yaml(resolve_project_root(project))
    manifest = PackageManifest.load(config.manifest_path)
    return config, manifest


def make_deployer(config: ReleaseConfig) -> Deployer:
    """
    Deployer for the project's CDN.

    Raises:
        CredentialsNotFoundError: If a required credential is missing
    """
    credentials = bunny_credentials_from_env(config.root)
    client = BunnyClient(
        credentials, timeout=config.cdn_timeout, max_workers=config.max_workers
    )
    return Deployer(config, client)
