"""
Tag enumeration for versiondocs.
"""

import logging
import subprocess
from typing import List, Optional

from ..errors import RepositoryUnavailable
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


class TagCatalog:
    """
    Lists every tag of a repository, unfiltered and unordered.

    Filtering and ordering belong to VersionResolver.
    """

    def __init__(self, repo_path: str, git_client: Optional[GitClient] = None):
        self.repo_path = str(repo_path)
        self.git = git_client or GitClient()

    def list_tags(self) -> List[str]:
        """
        Return all tag names known to the repository.

        Raises:
            RepositoryUnavailable: If the path is not a readable git repository
        """
        if not self.git.is_git_repo(self.repo_path):
            raise RepositoryUnavailable(f"Not a git repository: {self.repo_path}")

        try:
            tags = self.git.list_tags(self.repo_path)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or '').strip() or f"exit code {e.returncode}"
            raise RepositoryUnavailable(
                f"Cannot list tags in {self.repo_path}: {detail}"
            ) from e

        logger.debug(f"Found {len(tags)} tags in {self.repo_path}")
        return tags
