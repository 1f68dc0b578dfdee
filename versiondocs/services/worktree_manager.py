"""
Worktree management for versiondocs.

Two isolated git worktrees back a publish run:
- SOURCE: detached, switched to each version's ref in turn
- OUTPUT: the publish branch, accumulating every version's output

Neither disturbs the caller's own working directory. Any git failure
here is fatal to the run.
"""

import logging
import shutil
import subprocess
import tempfile
from enum import Enum
from pathlib import Path
from typing import Optional

from ..errors import WorktreeError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


def _describe(error: subprocess.CalledProcessError) -> str:
    return (error.stderr or '').strip() or f"exit code {error.returncode}"


class WorktreeManager:
    """
    Creates, switches and tears down the run's worktrees.

    Example:
        with WorktreeManager(repo_path) as worktrees:
            source = worktrees.acquire_source()
            output = worktrees.acquire_output("gh-pages")
            worktrees.checkout(source, "v0.9.0")
    """

    def __init__(
        self,
        repo_path: str,
        git_client: Optional[GitClient] = None,
        workdir: Optional[Path] = None,
        keep: bool = False,
    ):
        """
        Initialize WorktreeManager.

        Args:
            repo_path: Repository the worktrees are created from
            git_client: GitClient instance (creates new if None)
            workdir: Parent directory for the worktrees (temporary if None)
            keep: Leave worktrees in place on release (for a manual commit)
        """
        self.repo_path = str(repo_path)
        self.git = git_client or GitClient()
        self.keep = keep
        self._workdir = Path(workdir) if workdir else None
        self._owns_workdir = workdir is None
        self.source_path: Optional[Path] = None
        self.output_path: Optional[Path] = None

    @property
    def workdir(self) -> Path:
        if self._workdir is None:
            self._workdir = Path(tempfile.mkdtemp(prefix="versiondocs-"))
        return self._workdir

    def acquire_source(self) -> Path:
        """Create the detached SOURCE worktree."""
        path = self.workdir / "source"
        try:
            self.git.add_detached_worktree(self.repo_path, str(path))
        except subprocess.CalledProcessError as e:
            raise WorktreeError(f"Cannot create source worktree at {path}: {_describe(e)}") from e
        self.source_path = path
        logger.debug(f"Source worktree at {path}")
        return path

    def acquire_output(self, branch: str) -> Path:
        """
        Create the OUTPUT worktree on ``branch``.

        A missing branch is started as an orphan with no files.
        """
        path = self.workdir / branch.replace('/', '-')
        try:
            if self.git.branch_exists(self.repo_path, branch):
                self.git.add_branch_worktree(self.repo_path, str(path), branch)
            else:
                logger.info(f"Branch {branch} does not exist, starting it empty")
                self.git.add_detached_worktree(self.repo_path, str(path))
                self.output_path = path
                self.git.switch_orphan(str(path), branch)
        except subprocess.CalledProcessError as e:
            raise WorktreeError(f"Cannot create output worktree for {branch}: {_describe(e)}") from e
        self.output_path = path
        logger.debug(f"Output worktree at {path}")
        return path

    def checkout(self, path: Path, ref: str) -> None:
        """Switch a worktree to ``ref`` in place, discarding local changes."""
        try:
            self.git.force_checkout(str(path), ref)
        except subprocess.CalledProcessError as e:
            raise WorktreeError(f"Cannot check out {ref} in {path}: {_describe(e)}") from e

    def discard_changes(self, path: Path) -> None:
        try:
            self.git.discard_changes(str(path))
        except subprocess.CalledProcessError as e:
            raise WorktreeError(f"Cannot reset {path}: {_describe(e)}") from e

    def release(self) -> None:
        """Remove both worktrees and the temporary directory, unless kept."""
        if self.keep:
            logger.info(f"Leaving worktrees in {self._workdir}")
            return

        for path in (self.source_path, self.output_path):
            if path is not None and not self.git.remove_worktree(self.repo_path, str(path)):
                logger.warning(f"Could not remove worktree {path}")
        self.source_path = None
        self.output_path = None

        if self._owns_workdir and self._workdir is not None and self._workdir.exists():
            shutil.rmtree(self._workdir)
            self._workdir = None

    def __enter__(self) -> 'WorktreeManager':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class CheckoutState(Enum):
    """States of the reusable SOURCE checkout."""
    IDLE = "idle"
    CHECKED_OUT = "checked_out"
    BUILT = "built"


class SourceCheckout:
    """
    The SOURCE worktree as an explicit state machine.

        IDLE --checkout(ref)--> CHECKED_OUT --mark_built()--> BUILT
          ^                          |                          |
          +---------- reset() -------+--------------------------+

    ``reset`` discards local modifications (such as the title rewrite),
    so a version can only be checked out after the previous one was
    cleaned up.
    """

    def __init__(self, worktrees: WorktreeManager, path: Path):
        self.worktrees = worktrees
        self.path = Path(path)
        self.state = CheckoutState.IDLE
        self.ref: Optional[str] = None

    def checkout(self, ref: str) -> Path:
        if self.state != CheckoutState.IDLE:
            raise WorktreeError(
                f"Cannot check out {ref}: source worktree is {self.state.value} at {self.ref}"
            )
        self.worktrees.checkout(self.path, ref)
        self.state = CheckoutState.CHECKED_OUT
        self.ref = ref
        return self.path

    def mark_built(self) -> None:
        if self.state != CheckoutState.CHECKED_OUT:
            raise WorktreeError(f"Cannot mark {self.ref} built from state {self.state.value}")
        self.state = CheckoutState.BUILT

    def reset(self) -> None:
        if self.state != CheckoutState.IDLE:
            self.worktrees.discard_changes(self.path)
        self.state = CheckoutState.IDLE
        self.ref = None
