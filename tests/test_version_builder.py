"""
Tests for VersionBuilder.

The source checkout and site builder are mocked; the builder is handed a
real directory as its rendered output so the sync into the output tree
runs for real.
"""

from unittest.mock import MagicMock, patch

import pytest

from versiondocs.domain.build import BuildStatus
from versiondocs.domain.version import Version
from versiondocs.errors import BuildFailure, WorktreeError
from versiondocs.infra.site_builder import SiteBuilder
from versiondocs.services.version_builder import VersionBuilder
from versiondocs.services.worktree_manager import SourceCheckout


@pytest.fixture
def rendered(tmp_path):
    path = tmp_path / "source" / "rendered-docs"
    path.mkdir(parents=True)
    (path / "index.html").write_text("<h1>docs</h1>")
    (path / "guide.html").write_text("guide")
    return path


@pytest.fixture
def source(tmp_path):
    checkout = MagicMock(spec=SourceCheckout)
    checkout.checkout.return_value = tmp_path / "source"
    return checkout


@pytest.fixture
def site_builder(rendered):
    builder = MagicMock(spec=SiteBuilder)
    builder.config_path = "docs/.mdbook/book.toml"
    builder.has_config.return_value = True
    builder.config_file.return_value = rendered.parent / "book.toml"
    builder.build.return_value = rendered
    return builder


@pytest.fixture
def output(tmp_path):
    path = tmp_path / "output"
    path.mkdir()
    return path


RELEASE = Version("v0.9.0", "v0.9.0 stable", "v0.9.0")


class TestVersionBuilder:
    """Tests for building a single version."""

    def test_title(self, source, output, site_builder):
        builder = VersionBuilder(source, output, site_builder, "jj")

        assert builder.title_for(RELEASE) == "jj v0.9.0 stable docs"

    def test_custom_title_template(self, source, output, site_builder):
        builder = VersionBuilder(source, output, site_builder, "jj", title_template="{label} | {project}")

        assert builder.title_for(RELEASE) == "v0.9.0 stable | jj"

    def test_built(self, source, output, site_builder, rendered):
        builder = VersionBuilder(source, output, site_builder, "jj")

        result = builder.build(RELEASE)

        assert result.status == BuildStatus.BUILT
        assert result.output_path == str(output / "v0.9.0")
        assert result.files_copied == 2
        assert (output / "v0.9.0" / "guide.html").read_text() == "guide"
        source.checkout.assert_called_once_with("v0.9.0")
        site_builder.set_title.assert_called_once_with(
            rendered.parent / "book.toml", "jj v0.9.0 stable docs", ref="v0.9.0"
        )
        site_builder.build.assert_called_once_with(rendered.parent, ref="v0.9.0")
        source.mark_built.assert_called_once()
        source.reset.assert_called_once()

    def test_alias_is_checked_out_from_its_own_ref(self, source, output, site_builder):
        alias = Version("v0.8.0-mdbook", "v0.8.0 stable", "v0.8.0", is_alias=True)

        result = VersionBuilder(source, output, site_builder, "jj").build(alias)

        source.checkout.assert_called_once_with("v0.8.0-mdbook")
        assert result.output_path == str(output / "v0.8.0")

    def test_skipped_without_config(self, source, output, site_builder):
        site_builder.has_config.return_value = False

        result = VersionBuilder(source, output, site_builder, "jj").build(RELEASE)

        assert result.status == BuildStatus.SKIPPED
        site_builder.set_title.assert_not_called()
        site_builder.build.assert_not_called()
        assert not (output / "v0.9.0").exists()
        source.reset.assert_called_once()

    def test_failure_resets_source(self, source, output, site_builder):
        site_builder.build.side_effect = BuildFailure("exit 1", ref="v0.9.0")

        with pytest.raises(BuildFailure):
            VersionBuilder(source, output, site_builder, "jj").build(RELEASE)

        source.mark_built.assert_not_called()
        source.reset.assert_called_once()
        assert not (output / "v0.9.0").exists()

    def test_rebuild_replaces_previous_output(self, source, output, site_builder):
        stale = output / "v0.9.0" / "removed-page.html"
        stale.parent.mkdir()
        stale.write_text("old")

        result = VersionBuilder(source, output, site_builder, "jj").build(RELEASE)

        assert not stale.exists()
        assert result.files_deleted == 1

    def test_copy_failure_is_fatal_sync_error(self, source, output, site_builder):
        with patch(
            "versiondocs.services.version_builder.sync_tree",
            side_effect=OSError(28, "No space left on device"),
        ):
            with pytest.raises(WorktreeError) as excinfo:
                VersionBuilder(source, output, site_builder, "jj").build(RELEASE)

        assert excinfo.value.stage == "sync"
        assert "No space left on device" in str(excinfo.value)
        source.reset.assert_called_once()
