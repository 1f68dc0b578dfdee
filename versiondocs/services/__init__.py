"""
Service layer for versiondocs.

Contains the publishing pipeline, leaf-first:
- TagCatalog: Tag enumeration
- VersionResolver: Tags to ordered Versions
- WorktreeManager / SourceCheckout: Isolated checkouts
- VersionBuilder: One version into the output tree
- IndexComposer: The page linking every built version
- PublishCommit: One commit per run
- PublishService: Orchestrates all of the above

Services are the primary API for commands to use.
"""

from .tag_catalog import TagCatalog
from .version_resolver import VersionResolver
from .worktree_manager import WorktreeManager, SourceCheckout, CheckoutState
from .version_builder import VersionBuilder
from .index_composer import IndexComposer
from .publish_commit import PublishCommit
from .publish_service import PublishService, PublishOptions

__all__ = [
    'TagCatalog',
    'VersionResolver',
    'WorktreeManager',
    'SourceCheckout',
    'CheckoutState',
    'VersionBuilder',
    'IndexComposer',
    'PublishCommit',
    'PublishService',
    'PublishOptions',
]
