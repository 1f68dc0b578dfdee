"""
Final commit of a publish run.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..errors import EmptyCommit, WorktreeError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


class PublishCommit:
    """
    Stages everything in the OUTPUT worktree and records one commit.

    There is never more than one commit per run. An unchanged tree
    raises EmptyCommit instead of committing nothing.
    """

    def __init__(self, output_path: Path, git_client: Optional[GitClient] = None):
        self.output_path = str(output_path)
        self.git = git_client or GitClient()

    def commit(self, message: str) -> str:
        """
        Stage all changes and commit them.

        Returns:
            Hash of the new commit

        Raises:
            EmptyCommit: If nothing changed since the last publish
            WorktreeError: If staging or committing fails
        """
        try:
            self.git.add_all(self.output_path)
            if not self.git.has_staged_changes(self.output_path):
                raise EmptyCommit()
            sha = self.git.commit(self.output_path, message)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or '').strip() or f"exit code {e.returncode}"
            raise WorktreeError(
                f"Cannot commit in {self.output_path}: {detail}", stage="commit"
            ) from e

        logger.info(f"Committed {sha[:12]} in {self.output_path}")
        return sha
