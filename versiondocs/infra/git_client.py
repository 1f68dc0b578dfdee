"""
Git client infrastructure for versiondocs.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class GitClient:
    """
    Abstraction over git commands.

    Commands are passed as argument lists (never through a shell), so tag
    and branch names are used verbatim.

    Example:
        client = GitClient()
        for tag in client.list_tags("/path/to/repo"):
            print(tag)
    """

    def __init__(self, timeout: int = 120, env: Optional[Dict[str, str]] = None):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 120)
            env: Extra environment variables for every git invocation
        """
        self.timeout = timeout
        self.env = dict(env or {})

    def _run(
        self,
        args: List[str],
        cwd: str,
        check: bool = False,
    ) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments after ``git``
            cwd: Working directory
            check: Raise CalledProcessError on non-zero exit

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = ['git'] + list(args)
        env = None
        if self.env:
            env = os.environ.copy()
            env.update(self.env)

        logger.debug(f"Running in '{cwd}': {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            if check:
                raise subprocess.CalledProcessError(-1, cmd, output=e.output, stderr="timed out") from e
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            if check:
                raise subprocess.CalledProcessError(-1, cmd, stderr=str(e)) from e
            return None, -1

        if result.returncode != 0:
            stderr = (result.stderr or '').strip()
            if stderr:
                logger.debug(stderr)
            if check:
                raise subprocess.CalledProcessError(
                    result.returncode,
                    cmd,
                    output=result.stdout,
                    stderr=result.stderr
                )

        output = result.stdout
        return output.strip() if output else None, result.returncode

    def is_git_repo(self, path: str) -> bool:
        """Check if path is inside a git repository (worktrees included)."""
        if not Path(path).is_dir():
            return False
        _, code = self._run(['rev-parse', '--git-dir'], cwd=path)
        return code == 0

    def list_tags(self, path: str) -> List[str]:
        """
        List all tag names.

        Raises:
            subprocess.CalledProcessError: If git cannot read the tags
        """
        output, _ = self._run(['tag', '--list'], cwd=path, check=True)
        if not output:
            return []
        return [line.strip() for line in output.splitlines() if line.strip()]

    def rev_parse(self, path: str, ref: str = 'HEAD') -> Optional[str]:
        """Resolve a ref to a commit hash."""
        output, code = self._run(['rev-parse', '--verify', '--quiet', f'{ref}^{{commit}}'], cwd=path)
        if code == 0 and output:
            return output.strip()
        return None

    def branch_exists(self, path: str, branch: str, remote: str = 'origin') -> bool:
        """Check for a local branch, or a remote-tracking one git can check out."""
        for ref in (f'refs/heads/{branch}', f'refs/remotes/{remote}/{branch}'):
            _, code = self._run(['show-ref', '--verify', '--quiet', ref], cwd=path)
            if code == 0:
                return True
        return False

    def add_detached_worktree(self, path: str, worktree: str, ref: Optional[str] = None) -> None:
        """Create a worktree with a detached HEAD (at ``ref`` or HEAD)."""
        args = ['worktree', 'add', '--detach', '--quiet', str(worktree)]
        if ref:
            args.append(ref)
        self._run(args, cwd=path, check=True)

    def add_branch_worktree(self, path: str, worktree: str, branch: str) -> None:
        """Create a worktree on ``branch``, even if it is checked out elsewhere."""
        self._run(['worktree', 'add', '--force', '--quiet', str(worktree), branch], cwd=path, check=True)

    def switch_orphan(self, worktree: str, branch: str) -> None:
        """Start a new history-less branch in a worktree, removing tracked files."""
        self._run(['switch', '--quiet', '--orphan', branch], cwd=worktree, check=True)

    def remove_worktree(self, path: str, worktree: str) -> bool:
        """
        Remove a worktree and prune stale administrative entries.

        Returns:
            True if successful
        """
        _, code = self._run(['worktree', 'remove', '--force', str(worktree)], cwd=path)
        self._run(['worktree', 'prune'], cwd=path)
        return code == 0

    def force_checkout(self, worktree: str, ref: str) -> None:
        """Switch a worktree to ``ref`` (detached), discarding local changes."""
        self._run(['checkout', '--force', '--detach', '--quiet', ref], cwd=worktree, check=True)

    def discard_changes(self, worktree: str) -> None:
        """Reset tracked files to HEAD."""
        self._run(['reset', '--hard', '--quiet'], cwd=worktree, check=True)

    def add_all(self, worktree: str) -> None:
        """Stage every change, deletions included."""
        self._run(['add', '--all', '.'], cwd=worktree, check=True)

    def has_staged_changes(self, worktree: str) -> bool:
        """True if the index differs from HEAD (or HEAD is unborn and files are staged)."""
        if self.rev_parse(worktree) is None:
            output, _ = self._run(['ls-files', '--cached'], cwd=worktree, check=True)
            return bool(output)
        _, code = self._run(['diff', '--cached', '--quiet'], cwd=worktree)
        if code not in (0, 1):
            raise subprocess.CalledProcessError(code, ['git', 'diff', '--cached', '--quiet'])
        return code == 1

    def commit(self, worktree: str, message: str) -> str:
        """
        Commit staged changes.

        Returns:
            Hash of the new commit
        """
        self._run(['commit', '--quiet', '--message', message], cwd=worktree, check=True)
        return self.rev_parse(worktree) or ''


def identity_env(author_name: str = '', author_email: str = '') -> Dict[str, str]:
    """Commit identity variables for git, only for the values that are set."""
    env = {}
    if author_name:
        env['GIT_AUTHOR_NAME'] = author_name
        env['GIT_COMMITTER_NAME'] = author_name
    if author_email:
        env['GIT_AUTHOR_EMAIL'] = author_email
        env['GIT_COMMITTER_EMAIL'] = author_email
    return env
