"""
Domain layer for versiondocs.

Contains pure domain objects with no I/O or side effects:
- SemVer: Parsed version tag
- Version: A publishable documentation version
- AliasRule: Tag rename applied before the generic mapping
- BuildResult / PublishSummary: Outcomes of a publish run
"""

from .version import SemVer, Version, AliasRule, is_safe_directory_name
from .build import BuildStatus, BuildResult, PublishSummary

__all__ = [
    'SemVer',
    'Version',
    'AliasRule',
    'is_safe_directory_name',
    'BuildStatus',
    'BuildResult',
    'PublishSummary',
]
