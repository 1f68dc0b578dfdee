"""
Error taxonomy for the publishing pipeline.

Fatal errors (RepositoryUnavailable, WorktreeError, MissingTool) abort the
run. BuildFailure is scoped to a single version and is recorded, not
propagated. EmptyCommit is a distinct non-failure outcome.
"""

from typing import Optional

from .exit_codes import (
    CommandError,
    ConfigError,
    REPOSITORY_UNAVAILABLE,
    WORKTREE_ERROR,
    MISSING_TOOL,
    NOTHING_TO_PUBLISH,
    GENERAL_ERROR,
)

__all__ = [
    'CommandError',
    'ConfigError',
    'RepositoryUnavailable',
    'WorktreeError',
    'MissingTool',
    'BuildFailure',
    'EmptyCommit',
]


class RepositoryUnavailable(CommandError):
    """Tags cannot be enumerated or the path is not a git repository."""
    stage = "tags"

    def __init__(self, message: str):
        super().__init__(message, REPOSITORY_UNAVAILABLE)


class WorktreeError(CommandError):
    """A worktree could not be created, switched or reset."""
    stage = "worktree"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message, WORKTREE_ERROR, stage)


class MissingTool(CommandError):
    """A required executable is not available on PATH."""
    stage = "prerequisites"

    def __init__(self, tools):
        self.tools = list(tools)
        super().__init__(
            f"Cannot find {', '.join(repr(t) for t in self.tools)} in PATH",
            MISSING_TOOL,
        )


class BuildFailure(CommandError):
    """The site builder failed for one version."""
    stage = "build"

    def __init__(self, message: str, ref: Optional[str] = None, output: str = ""):
        super().__init__(message, GENERAL_ERROR)
        self.ref = ref
        self.output = output


class EmptyCommit(CommandError):
    """Nothing changed in the output tree since the last publish."""
    stage = "commit"

    def __init__(self, message: str = "Nothing to publish: output tree is unchanged"):
        super().__init__(message, NOTHING_TO_PUBLISH)
