"""
Bunny CDN upload and purge client.

CDN folder structure::

    staging/app.js              no version segment, always overwritten
    staging/app.css
    production/latest/app.js
    production/latest/app.css

Uploads and purges of one deploy are independent and run in parallel; the
first failure cancels whatever has not started yet and aborts the deploy.
"""

import logging
import mimetypes
import threading
from functools import partial
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

import requests

from cdnrelease.constants import PRODUCTION, STAGING
from cdnrelease.exceptions import DeploymentError, InvalidEnvironmentError
from cdnrelease.remote.credentials import BunnyCredentials

logger = logging.getLogger(__name__)

PURGE_ENDPOINT = "https://api.bunny.net/purge"

CONTENT_TYPES = {
    ".js": "application/javascript",
    ".css": "text/css",
}

T = TypeVar("T")


def remote_base(environment: str) -> str:
    """Remote folder of an environment's latest slot."""
    if environment == STAGING:
        return "staging"
    if environment == PRODUCTION:
        return "production/latest"
    raise InvalidEnvironmentError(environment, (STAGING, PRODUCTION))


def content_type(path: Path) -> str:
    ext = path.suffix.lower()
    if ext in CONTENT_TYPES:
        return CONTENT_TYPES[ext]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


class BunnyClient:
    """
    Uploads files to a Bunny storage zone and purges CDN URLs.

    Each worker thread gets its own requests.Session. A session passed in by
    the caller is used by every thread as is.
    """

    def __init__(
        self,
        credentials: BunnyCredentials,
        session: Optional[requests.Session] = None,
        timeout: float = 60.0,
        max_workers: int = 8,
    ):
        self.credentials = credentials
        self.session = session
        self._local = threading.local()
        self.timeout = timeout
        self.max_workers = max_workers

    def upload(self, local_file: Path, remote_path: str) -> Dict:
        """
        Upload a single file.

        Args:
            local_file: Path to the local file
            remote_path: Path in the storage zone, e.g. "staging/app.js"

        Returns:
            {"file": remote_path, "status": http_status}

        Raises:
            DeploymentError: On an unreadable file, transport errors or a
                non-2xx response
        """
        local_file = Path(local_file)
        url = (
            f"https://{self.credentials.storage_host}/"
            f"{self.credentials.storage_name}/{remote_path}"
        )
        headers = {
            "AccessKey": self.credentials.storage_key,
            "Content-Type": content_type(local_file),
        }
        try:
            with open(local_file, "rb") as f:
                response = self._session().put(
                    url, headers=headers, data=f.read(), timeout=self.timeout
                )
        except (requests.RequestException, OSError) as e:
            raise DeploymentError(remote_path, detail=str(e)) from e

        if not response.ok:
            raise DeploymentError(remote_path, response.status_code, response.text)

        logger.debug(f"Uploaded {local_file} → {remote_path}")
        return {"file": remote_path, "status": response.status_code}

    def purge(self, url: str) -> Dict:
        """
        Purge one CDN URL with the account API key.

        Returns:
            {"url": url, "status": http_status}

        Raises:
            DeploymentError: On transport errors or a non-2xx response
        """
        try:
            response = self._session().post(
                PURGE_ENDPOINT,
                params={"url": url, "async": "false"},
                headers={"AccessKey": self.credentials.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DeploymentError(url, detail=str(e)) from e

        if not response.ok:
            raise DeploymentError(url, response.status_code, response.text)

        logger.debug(f"Purged {url}")
        return {"url": url, "status": response.status_code}

    def upload_files(self, files: Iterable[Tuple[Path, str]]) -> List[Dict]:
        """Upload (local, remote) pairs in parallel."""
        return self._fan_out(
            [partial(self.upload, local, remote) for local, remote in files]
        )

    def purge_urls(self, urls: Iterable[str]) -> List[Dict]:
        """Purge CDN URLs in parallel."""
        return self._fan_out([partial(self.purge, url) for url in urls])

    def deploy_environment(
        self, environment: str, latest_dir: Path, files: List[str]
    ) -> List[Dict]:
        """
        Upload an environment's files and purge their CDN URLs.

        Args:
            environment: "staging" or "production"
            latest_dir: Local latest slot
            files: Paths relative to ``latest_dir``, e.g. ["app.js", "app.css"]

        Returns:
            Upload results followed by purge results
        """
        base = remote_base(environment)

        logger.info(f"Uploading {environment} build to Bunny CDN...")
        uploads = self.upload_files(
            (Path(latest_dir) / name, f"{base}/{name}") for name in files
        )
        logger.info(f"Upload complete ({', '.join(files)})")

        logger.info("Purging CDN cache...")
        purges = self.purge_urls(
            f"{self.credentials.cdn_url}/{base}/{name}" for name in files
        )
        logger.info(f"Cache purged, {environment} is live")
        return uploads + purges

    def _session(self) -> requests.Session:
        if self.session is not None:
            return self.session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def _fan_out(self, tasks: List[Callable[[], T]]) -> List[T]:
        if not tasks:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(task) for task in tasks]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in done:
                error = future.exception()
                if error is not None:
                    raise error
        return [future.result() for future in futures]
