"""
Infrastructure layer for versiondocs.

Contains abstractions for external systems:
- GitClient: Git command execution
- SiteBuilder: Static-site generator invocation
- sync_tree: Deletion-aware directory mirroring

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, identity_env
from .site_builder import SiteBuilder
from .sync import sync_tree, SyncStats

__all__ = [
    'GitClient',
    'identity_env',
    'SiteBuilder',
    'sync_tree',
    'SyncStats',
]
