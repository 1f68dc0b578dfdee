"""
Tests for VersionResolver.

Tests cover:
- Version tag filtering and descending order
- The synthetic head version
- Legacy head markers and corrected-release aliases
- Label and directory uniqueness
"""

import pytest

from versiondocs.config import get_default_config, load_config
from versiondocs.domain.version import Version
from versiondocs.errors import ConfigError
from versiondocs.services.version_resolver import (
    VersionResolver,
    corrected_release_rule,
    head_version,
    legacy_head_rule,
)


@pytest.fixture
def resolver():
    return VersionResolver.from_config(get_default_config())


def labels(versions):
    return [v.label for v in versions]


class TestHeadVersion:
    """Tests for the synthetic in-development version."""

    def test_empty_tag_set_yields_only_head(self, resolver):
        versions = resolver.resolve([])

        assert len(versions) == 1
        head = versions[0]
        assert head.source_ref == "main"
        assert head.label == "prerelease (main branch)"
        assert head.directory == "main"
        assert head.is_head

    def test_head_is_first_regardless_of_input_order(self, resolver):
        for tags in (["v9.9.9", "v0.1.0"], ["v0.1.0", "v9.9.9"], ["zzz", "v1.0"]):
            versions = resolver.resolve(tags)
            assert versions[0].is_head
            assert versions[0].label == "prerelease (main branch)"

    def test_legacy_head_marker_collapses_into_head(self, resolver):
        versions = resolver.resolve(["mdbook", "v0.9.0"])

        assert labels(versions) == ["prerelease (main branch)", "v0.9.0 stable"]
        assert versions[0].source_ref == "main"

    def test_custom_head(self):
        config = get_default_config()
        config["versions"]["head_ref"] = "trunk"
        config["versions"]["head_label"] = "nightly"
        config["versions"]["head_directory"] = "latest"

        versions = VersionResolver.from_config(config).resolve([])

        assert versions == [Version("trunk", "nightly", "latest", is_head=True)]


class TestFilteringAndOrder:
    """Tests for tag selection and sorting."""

    def test_non_version_tags_are_discarded(self, resolver):
        versions = resolver.resolve(["release-candidate", "v1", "1.0.0.0", "latest", "v1.2"])

        assert labels(versions) == ["prerelease (main branch)", "v1.2 stable"]

    def test_descending_semantic_order(self, resolver):
        versions = resolver.resolve(["v0.9.0", "v0.10.0", "v0.2.1", "v1.0.0", "v0.10.1"])

        assert [v.directory for v in versions[1:]] == [
            "v1.0.0", "v0.10.1", "v0.10.0", "v0.9.0", "v0.2.1",
        ]

    def test_missing_patch_sorts_below_explicit_patch(self, resolver):
        versions = resolver.resolve(["v1.2", "v1.2.0", "v1.1.5"])

        assert [v.directory for v in versions[1:]] == ["v1.2.0", "v1.2", "v1.1.5"]

    def test_generic_mapping(self, resolver):
        versions = resolver.resolve(["v0.9.0"])
        version = versions[1]

        assert version.source_ref == "v0.9.0"
        assert version.label == "v0.9.0 stable"
        assert version.directory == "v0.9.0"
        assert not version.is_alias

    def test_duplicate_input_tags(self, resolver):
        versions = resolver.resolve(["v0.9.0", "v0.9.0"])

        assert labels(versions) == ["prerelease (main branch)", "v0.9.0 stable"]


class TestAliases:
    """Tests for the corrected-release alias."""

    def test_known_bad_release_is_aliased(self, resolver):
        versions = resolver.resolve(["v0.9.0", "v0.10.0", "v0.8.0-mdbook", "v0.8.0"])

        assert labels(versions) == [
            "prerelease (main branch)",
            "v0.10.0 stable",
            "v0.9.0 stable",
            "v0.8.0 stable",
        ]
        alias = versions[-1]
        assert alias.is_alias
        assert alias.source_ref == "v0.8.0-mdbook"
        assert alias.directory == "v0.8.0"

    def test_alias_wins_whatever_the_input_order(self, resolver):
        for tags in (["v0.8.0", "v0.8.0-mdbook"], ["v0.8.0-mdbook", "v0.8.0"]):
            versions = resolver.resolve(tags)
            assert len(versions) == 2
            assert versions[1].source_ref == "v0.8.0-mdbook"

    def test_alias_without_the_bare_tag(self, resolver):
        versions = resolver.resolve(["v0.8.0-mdbook"])

        assert versions[1].label == "v0.8.0 stable"

    def test_other_suffixed_tags_use_generic_mapping(self, resolver):
        versions = resolver.resolve(["v0.9.0-mdbook", "v0.9.0"])

        assert labels(versions) == [
            "prerelease (main branch)",
            "v0.9.0 stable",
            "v0.9.0-mdbook stable",
        ]

    def test_aliases_can_be_replaced(self):
        config = get_default_config()
        config["versions"]["aliases"] = {"v2.0.0-fixed": "v2.0.0"}

        versions = VersionResolver.from_config(config).resolve(["v0.8.0-mdbook", "v2.0.0-fixed"])

        assert labels(versions) == [
            "prerelease (main branch)",
            "v2.0.0 stable",
            "v0.8.0-mdbook stable",
        ]

    def test_aliases_cleared_by_config_file(self, tmp_path):
        (tmp_path / ".versiondocs.json").write_text('{"versions": {"aliases": {}}}')

        versions = VersionResolver.from_config(load_config(tmp_path)).resolve(
            ["v0.8.0", "v0.8.0-mdbook"]
        )

        assert [v.source_ref for v in versions] == ["main", "v0.8.0", "v0.8.0-mdbook"]
        assert versions[2].label == "v0.8.0-mdbook stable"
        assert not any(v.is_alias for v in versions)

    def test_invalid_alias_directory_is_config_error(self):
        config = get_default_config()
        config["versions"]["aliases"] = {"v1.0.0-x": "../escape"}

        with pytest.raises(ConfigError):
            VersionResolver.from_config(config)

    def test_rules_are_evaluated_in_order(self):
        head = head_version()
        first = corrected_release_rule("v1.0.0-x", "v1.0.0")
        second = corrected_release_rule("v1.0.0-x", "v1.0.1")
        resolver = VersionResolver(head=head, rules=[legacy_head_rule([], head), first, second])

        versions = resolver.resolve(["v1.0.0-x"])

        assert versions[1].directory == "v1.0.0"


class TestUniqueness:
    """Labels and directories never repeat."""

    @pytest.mark.parametrize("tags", [
        [],
        ["mdbook"],
        ["v0.8.0", "v0.8.0-mdbook", "mdbook", "main"],
        ["v1.0", "v1.0.0", "1.0", "1.0.0", "v1.0.0-rc.a"],
        ["v0.1.0", "v0.10.0", "v0.2.0", "v0.20.0", "v0.8.0-mdbook", "v0.8.0", "junk"],
    ])
    def test_labels_and_directories_unique(self, resolver, tags):
        versions = resolver.resolve(tags)

        assert len({v.label for v in versions}) == len(versions)
        assert len({v.directory for v in versions}) == len(versions)
        assert versions[0].is_head

    def test_tag_colliding_with_head_is_dropped(self):
        config = get_default_config()
        config["versions"]["stable_label"] = "prerelease (main branch)"

        versions = VersionResolver.from_config(config).resolve(["v1.0.0"])

        assert len(versions) == 1
        assert versions[0].is_head
