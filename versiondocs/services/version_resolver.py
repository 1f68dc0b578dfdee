"""
Version resolution for versiondocs.

Turns the raw tag list into the ordered list of Versions to publish:

1. Alias rules (an ordered list) get the first look at every tag.
2. Remaining tags are kept only if they look like a version
   (``vMAJOR.MINOR[.PATCH][-suffix]``) and map to ``"<tag> stable"``.
3. The synthetic head version comes first, the rest follow in
   descending version order.
4. Entries sharing a label or directory collapse to one: head beats
   alias beats a plain tag.

The alias list is a fixed set of known exceptions taken from
configuration; no renaming is ever inferred.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..domain.version import AliasRule, SemVer, Version
from ..errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_HEAD_REF = "main"
DEFAULT_HEAD_LABEL = "prerelease (main branch)"
DEFAULT_STABLE_LABEL = "{tag} stable"

# Sorts below every parsed version
_UNVERSIONED_KEY: Tuple = (-1,)


def head_version(
    ref: str = DEFAULT_HEAD_REF,
    label: str = DEFAULT_HEAD_LABEL,
    directory: Optional[str] = None,
) -> Version:
    """The synthetic in-development version."""
    return Version(source_ref=ref, label=label, directory=directory or ref, is_head=True)


def legacy_head_rule(markers: Iterable[str], head: Version) -> AliasRule:
    """Tags that used to mark the development line publish as the head."""
    markers = frozenset(markers)
    return AliasRule(
        name="legacy-head-marker",
        matches=lambda tag: tag in markers,
        rewrite=lambda tag: head,
    )


def corrected_release_rule(tag: str, release: str, stable_label: str = DEFAULT_STABLE_LABEL) -> AliasRule:
    """Publish ``tag``'s tree under the name of the release it stands in for."""
    version = Version(
        source_ref=tag,
        label=stable_label.format(tag=release),
        directory=release,
        is_alias=True,
    )
    return AliasRule(
        name=f"corrected-release:{tag}",
        matches=lambda candidate: candidate == tag,
        rewrite=lambda candidate: version,
    )


class VersionResolver:
    """
    Maps raw tags to an ordered, label-unique list of Versions.

    Example:
        resolver = VersionResolver.from_config(config)
        for version in resolver.resolve(["v0.9.0", "v0.10.0", "nightly"]):
            print(version.directory, version.label)
        # main prerelease (main branch)
        # v0.10.0 v0.10.0 stable
        # v0.9.0 v0.9.0 stable
    """

    def __init__(
        self,
        head: Optional[Version] = None,
        rules: Optional[List[AliasRule]] = None,
        stable_label: str = DEFAULT_STABLE_LABEL,
    ):
        self.head = head or head_version()
        self.rules = list(rules or [])
        self.stable_label = stable_label

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'VersionResolver':
        """
        Build a resolver from the ``versions`` config section.

        Raises:
            ConfigError: If an alias names an unusable output directory
        """
        section = config.get("versions", {})
        stable_label = section.get("stable_label") or DEFAULT_STABLE_LABEL
        try:
            head = head_version(
                ref=section.get("head_ref") or DEFAULT_HEAD_REF,
                label=section.get("head_label") or DEFAULT_HEAD_LABEL,
                directory=section.get("head_directory") or None,
            )
            rules = [legacy_head_rule(section.get("legacy_head_markers") or [], head)]
            for tag, release in (section.get("aliases") or {}).items():
                rules.append(corrected_release_rule(tag, str(release), stable_label))
        except ValueError as e:
            raise ConfigError(f"Invalid versions configuration: {e}") from e
        return cls(head=head, rules=rules, stable_label=stable_label)

    def stable_version(self, tag: str) -> Version:
        """Generic mapping for a version tag with no alias rule."""
        return Version(
            source_ref=tag,
            label=self.stable_label.format(tag=tag),
            directory=tag,
        )

    def _map_tag(self, tag: str) -> Optional[Version]:
        for rule in self.rules:
            version = rule.apply(tag)
            if version is not None:
                logger.debug(f"Tag {tag} matched alias rule {rule.name}")
                return version

        if SemVer.parse(tag) is None:
            logger.debug(f"Ignoring non-version tag {tag}")
            return None
        return self.stable_version(tag)

    @staticmethod
    def _sort_key(version: Version) -> Tuple:
        parsed = SemVer.parse(version.directory) or SemVer.parse(version.source_ref)
        if parsed is None:
            return _UNVERSIONED_KEY
        return parsed.sort_key()

    def resolve(self, tags: Iterable[str]) -> List[Version]:
        """
        Resolve raw tags into the publish order.

        Args:
            tags: Tag names in any order

        Returns:
            Versions, head first, then descending by version
        """
        heads = [self.head]
        others = []
        for tag in sorted(set(tags)):
            version = self._map_tag(tag)
            if version is None:
                continue
            if version.is_head:
                heads.append(version)
            else:
                others.append(version)

        others.sort(key=lambda v: v.source_ref, reverse=True)
        others.sort(key=self._sort_key, reverse=True)

        return self._deduplicate(heads + others)

    @staticmethod
    def _deduplicate(ordered: List[Version]) -> List[Version]:
        """Keep one version per label and per directory, by priority."""
        # Winner index per label and per directory; earlier wins ties
        best_label: Dict[str, int] = {}
        best_dir: Dict[str, int] = {}
        for index, version in enumerate(ordered):
            for key, best in ((version.label, best_label), (version.directory, best_dir)):
                current = best.get(key)
                if current is None or version.priority > ordered[current].priority:
                    best[key] = index

        resolved = []
        for index, version in enumerate(ordered):
            if best_label[version.label] != index or best_dir[version.directory] != index:
                logger.debug(f"Dropping duplicate version {version.source_ref} ({version.label})")
                continue
            resolved.append(version)
        return resolved
