"""
Version domain objects for versiondocs.

A Version is what gets published: a ref to check out, the label shown to
readers, and the directory it lands in inside the output tree.

    SemVer.parse("v0.10.0")         -> SemVer(major=0, minor=10, patch=0, ...)
    SemVer.parse("v1.2-mdbook")     -> SemVer(major=1, minor=2, patch=None,
                                              suffix="mdbook", ...)
    SemVer.parse("nightly")         -> None

Alias rules rename specific raw tags before the generic
"<tag> stable" mapping is applied.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple


SEMVER_PATTERN = re.compile(
    r'^v?(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?'
    r'(?:-(?P<suffix>[0-9A-Za-z.-]*[A-Za-z][0-9A-Za-z.-]*))?$'
)


@dataclass(frozen=True)
class SemVer:
    """
    Parsed ``major.minor[.patch][-suffix]`` tag.

    Ordering is numeric. A missing patch sorts below any explicit
    patch, and a suffixed tag sorts below the bare release with the
    same numbers.
    """

    raw: str
    major: int
    minor: int
    patch: Optional[int] = None
    suffix: Optional[str] = None

    @classmethod
    def parse(cls, tag: str) -> Optional['SemVer']:
        """Parse a tag name, returning None when it is not a version."""
        match = SEMVER_PATTERN.match(tag.strip())
        if not match:
            return None
        patch = match.group('patch')
        return cls(
            raw=tag,
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(patch) if patch is not None else None,
            suffix=match.group('suffix'),
        )

    def sort_key(self) -> Tuple:
        return (
            self.major,
            self.minor,
            -1 if self.patch is None else self.patch,
            0 if self.suffix else 1,
            self.suffix or '',
        )

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class Version:
    """
    A publishable documentation version.

    Attributes:
        source_ref: Ref checked out in the source worktree
        label: Friendly label (e.g. "v0.9.0 stable")
        directory: Output subdirectory name
        is_alias: Produced by an alias rule that renamed the tag
        is_head: The synthetic in-development version
    """

    source_ref: str
    label: str
    directory: str
    is_alias: bool = False
    is_head: bool = False

    def __post_init__(self):
        if not is_safe_directory_name(self.directory):
            raise ValueError(f"Invalid output directory name: {self.directory!r}")

    @property
    def priority(self) -> int:
        """Which entry survives when two versions share a label."""
        if self.is_head:
            return 2
        if self.is_alias:
            return 1
        return 0

    def to_dict(self) -> dict:
        return {
            'source_ref': self.source_ref,
            'label': self.label,
            'directory': self.directory,
            'is_alias': self.is_alias,
            'is_head': self.is_head,
        }

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class AliasRule:
    """
    One entry of the ordered alias list.

    ``matches`` decides whether the rule applies to a raw tag and
    ``rewrite`` produces the Version published for it.
    """

    name: str
    matches: Callable[[str], bool]
    rewrite: Callable[[str], Version]

    def apply(self, tag: str) -> Optional[Version]:
        if self.matches(tag):
            return self.rewrite(tag)
        return None


def is_safe_directory_name(name: str) -> bool:
    """A single, non-hidden path component."""
    return bool(name) and name not in ('.', '..') and '/' not in name \
        and '\\' not in name and not name.startswith('.')
