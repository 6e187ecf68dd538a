"""
Version-control information for version records.

Builds are stamped with the short commit id and branch of the project
repository. Outside of a repository the provider degrades to sentinel values
instead of failing.
"""

import logging
from pathlib import Path
from typing import Optional

from git import Repo
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError

logger = logging.getLogger(__name__)

UNKNOWN_COMMIT = "local"
UNKNOWN_BRANCH = "unknown"
SHORT_SHA_LENGTH = 7


class GitInfoProvider:
    """Supplies short commit id and branch name of a working tree."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else Path.cwd()
        self.repo: Optional[Repo] = None
        try:
            self.repo = Repo(self.path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            # Not a git repo, that's OK
            logger.debug(f"{self.path} is not under version control")

    def commit(self) -> str:
        """Short commit id of HEAD, or ``local``."""
        if self.repo is None:
            return UNKNOWN_COMMIT
        try:
            return self.repo.head.commit.hexsha[:SHORT_SHA_LENGTH]
        except (GitError, ValueError):
            # Repository without commits
            return UNKNOWN_COMMIT

    def branch(self) -> str:
        """Active branch name, ``HEAD`` when detached, or ``unknown``."""
        if self.repo is None:
            return UNKNOWN_BRANCH
        try:
            if self.repo.head.is_detached:
                return "HEAD"
            return self.repo.active_branch.name
        except (GitError, TypeError, ValueError):
            return UNKNOWN_BRANCH
