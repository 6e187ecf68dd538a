import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from cdnrelease.exceptions import CredentialsNotFoundError

REQUIRED_VARIABLES = (
    "BUNNY_STORAGE_NAME",
    "BUNNY_STORAGE_KEY",
    "BUNNY_API_KEY",
    "BUNNY_CDN_URL",
)


@dataclass(frozen=True)
class BunnyCredentials:
    storage_name: str
    storage_key: str
    api_key: str
    cdn_url: str
    region: str = ""

    @property
    def storage_host(self) -> str:
        # Default region (Falkenstein) has no prefix
        if self.region:
            return f"{self.region}.storage.bunnycdn.com"
        return "storage.bunnycdn.com"


def load_dotenv_file(start: Optional[Path] = None) -> Optional[Path]:
    """
    Load the nearest ``.env`` file without overriding the environment.

    Walks up from ``start`` (default: cwd) and loads the first ``.env`` found.

    Returns:
        The loaded file, or None
    """
    current_path = Path(start) if start is not None else Path.cwd()
    for parent in [current_path] + list(current_path.parents):
        dotenv_path = parent / ".env"
        if dotenv_path.exists():
            load_dotenv(dotenv_path=dotenv_path, override=False)
            return dotenv_path
    return None


def bunny_credentials_from_env(project_root: Optional[Path] = None) -> BunnyCredentials:
    """
    Get Bunny CDN credentials from environment variables or a ``.env`` file.

    Raises:
        CredentialsNotFoundError: If a required variable is missing or empty
    """
    load_dotenv_file(project_root)

    for variable in REQUIRED_VARIABLES:
        if not os.environ.get(variable):
            raise CredentialsNotFoundError(variable)

    return BunnyCredentials(
        storage_name=os.environ["BUNNY_STORAGE_NAME"],
        storage_key=os.environ["BUNNY_STORAGE_KEY"],
        api_key=os.environ["BUNNY_API_KEY"],
        cdn_url=os.environ["BUNNY_CDN_URL"].rstrip("/"),
        region=os.environ.get("BUNNY_STORAGE_REGION", ""),
    )
