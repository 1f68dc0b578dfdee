"""
Per-version build for versiondocs.

For one Version: check out its ref in the SOURCE worktree, skip it if the
build configuration is absent, otherwise stamp the label into the title,
run the site builder and mirror the rendered site into the OUTPUT tree.
"""

import logging
from pathlib import Path

from ..domain.build import BuildResult, BuildStatus
from ..domain.version import Version
from ..errors import WorktreeError
from ..infra.site_builder import SiteBuilder
from ..infra.sync import sync_tree
from .worktree_manager import SourceCheckout

logger = logging.getLogger(__name__)


class VersionBuilder:
    """
    Builds versions one at a time into a shared output tree.

    Raises BuildFailure for a version whose build fails; the caller
    records it and moves on. The source checkout is reset after every
    version, failed ones included.
    """

    def __init__(
        self,
        source: SourceCheckout,
        output_path: Path,
        site_builder: SiteBuilder,
        project: str,
        title_template: str = "{project} {label} docs",
    ):
        self.source = source
        self.output_path = Path(output_path)
        self.site_builder = site_builder
        self.project = project
        self.title_template = title_template

    def title_for(self, version: Version) -> str:
        return self.title_template.format(project=self.project, label=version.label)

    def build(self, version: Version) -> BuildResult:
        """
        Build one version.

        Returns:
            BuildResult with BUILT or SKIPPED status

        Raises:
            BuildFailure: If the site builder fails for this version
            WorktreeError: If the source worktree cannot be switched or reset,
                or the output cannot be copied into the output tree
        """
        source_root = self.source.checkout(version.source_ref)
        try:
            if not self.site_builder.has_config(source_root):
                logger.info(
                    f"Skipping {version.source_ref}: no {self.site_builder.config_path}"
                )
                return BuildResult(version=version, status=BuildStatus.SKIPPED)

            config_file = self.site_builder.config_file(source_root)
            self.site_builder.set_title(config_file, self.title_for(version), ref=version.source_ref)
            rendered = self.site_builder.build(source_root, ref=version.source_ref)
            self.source.mark_built()

            destination = self.output_path / version.directory
            try:
                stats = sync_tree(rendered, destination)
            except OSError as e:
                raise WorktreeError(
                    f"Cannot copy {version.source_ref} output into {destination}: {e}",
                    stage="sync",
                ) from e
            return BuildResult(
                version=version,
                status=BuildStatus.BUILT,
                output_path=str(destination),
                files_copied=stats.files_copied,
                files_deleted=stats.files_deleted,
            )
        finally:
            self.source.reset()
