"""
versiondocs - Publish versioned documentation from git tags.

versiondocs builds the documentation of every release tag (plus the
development branch) into a single static site with one subdirectory per
version and an index page linking them.

Quick Start:
    from versiondocs import PublishService, PublishOptions

    service = PublishService()
    for message in service.run("/path/to/repo", PublishOptions(dry_run=True)):
        print(message)

    summary = service.last_result
    print(summary.built, summary.skipped, summary.failed)

Pipeline:
    TagCatalog      - lists the repository's tags
    VersionResolver - tags to ordered Versions (head first)
    WorktreeManager - isolated source and output checkouts
    VersionBuilder  - builds one version into the output tree
    IndexComposer   - index page linking each built version
    PublishCommit   - one commit per run
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    SemVer,
    Version,
    AliasRule,
    BuildStatus,
    BuildResult,
    PublishSummary,
)

# Services
from .services import (
    TagCatalog,
    VersionResolver,
    WorktreeManager,
    SourceCheckout,
    VersionBuilder,
    IndexComposer,
    PublishCommit,
    PublishService,
    PublishOptions,
)

# Errors
from .errors import (
    CommandError,
    ConfigError,
    RepositoryUnavailable,
    WorktreeError,
    MissingTool,
    BuildFailure,
    EmptyCommit,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    "__version__",
    "SemVer",
    "Version",
    "AliasRule",
    "BuildStatus",
    "BuildResult",
    "PublishSummary",
    "TagCatalog",
    "VersionResolver",
    "WorktreeManager",
    "SourceCheckout",
    "VersionBuilder",
    "IndexComposer",
    "PublishCommit",
    "PublishService",
    "PublishOptions",
    "CommandError",
    "ConfigError",
    "RepositoryUnavailable",
    "WorktreeError",
    "MissingTool",
    "BuildFailure",
    "EmptyCommit",
    "load_config",
    "save_config",
]
