"""
Publish orchestration for versiondocs.

Runs the whole pipeline: list tags, resolve versions, build each version
into the output worktree, compose the index and commit once. Used by the
`versiondocs publish` command.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

from ..config import load_config, project_name
from ..domain.build import BuildResult, BuildStatus, PublishSummary
from ..domain.version import Version
from ..errors import BuildFailure, CommandError, EmptyCommit, MissingTool
from ..infra.git_client import GitClient, identity_env
from ..infra.site_builder import SiteBuilder
from .index_composer import IndexComposer
from .publish_commit import PublishCommit
from .tag_catalog import TagCatalog
from .version_builder import VersionBuilder
from .version_resolver import VersionResolver
from .worktree_manager import SourceCheckout, WorktreeManager

logger = logging.getLogger(__name__)


@dataclass
class PublishOptions:
    """Options for a publish run; None falls back to configuration."""
    branch: Optional[str] = None
    project: Optional[str] = None
    message: Optional[str] = None
    dry_run: bool = False
    no_commit: bool = False  # Leave the output worktree for a manual commit
    keep_worktrees: bool = False
    workdir: Optional[Path] = None


class PublishService:
    """
    Service that publishes every documentation version of a repository.

    Processing is strictly sequential: the source worktree is a single
    checkout reused for every version. A version that fails to build is
    recorded and skipped; setup failures abort the run.

    Example:
        service = PublishService()
        options = PublishOptions(branch="gh-pages")

        for progress in service.run("/path/to/repo", options):
            print(progress)  # "Building v0.9.0 stable (v0.9.0)..."

        result = service.last_result
        print(f"Built {result.built} versions")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        site_builder: Optional[SiteBuilder] = None,
    ):
        """
        Initialize PublishService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (created from config if None)
            site_builder: SiteBuilder instance (created from config if None)
        """
        self.config = config or load_config()
        git_config = self.config.get("git", {})
        self.git = git_client or GitClient(
            timeout=git_config.get("timeout_seconds", 120),
            env=identity_env(git_config.get("author_name", ""), git_config.get("author_email", "")),
        )
        builder_config = self.config.get("builder", {})
        self.site_builder = site_builder or SiteBuilder(
            command=builder_config.get("command") or ["mdbook", "build"],
            config_path=builder_config.get("config_path", "docs/.mdbook/book.toml"),
            default_build_dir=builder_config.get("default_build_dir", "book"),
            timeout=builder_config.get("timeout_seconds") or None,
        )
        self.last_result: Optional[PublishSummary] = None

    def check_prerequisites(self, need_builder: bool = True) -> None:
        """
        Make sure git (and the site builder) can be run.

        Raises:
            MissingTool: Naming every executable that is missing
        """
        tools = ['git']
        if need_builder:
            tools.append(self.site_builder.executable)
        missing = [tool for tool in tools if shutil.which(tool) is None]
        if missing:
            raise MissingTool(missing)

    def resolve_versions(self, repo_path: str) -> List[Version]:
        """
        List the versions a publish run would process, in order.

        Raises:
            RepositoryUnavailable: If tags cannot be listed
            ConfigError: If the alias configuration is invalid
        """
        tags = TagCatalog(repo_path, self.git).list_tags()
        resolver = VersionResolver.from_config(self.config)
        return resolver.resolve(tags)

    def run(
        self,
        repo_path: str,
        options: Optional[PublishOptions] = None
    ) -> Generator[str, None, PublishSummary]:
        """
        Publish all versions of ``repo_path`` to the publish branch.

        Args:
            repo_path: Repository to publish from
            options: Publish options

        Yields:
            Progress messages

        Returns:
            PublishSummary with one result per resolved version

        Raises:
            CommandError: For fatal errors (missing tool, unreadable
                repository, worktree failure); ``last_result`` keeps the
                partial summary with ``aborted_stage`` set
        """
        options = options or PublishOptions()
        publish_config = self.config.get("publish", {})
        branch = options.branch or publish_config.get("branch") or "gh-pages"

        summary = PublishSummary(branch=branch, dry_run=options.dry_run)
        self.last_result = summary

        try:
            self.check_prerequisites(need_builder=not options.dry_run)
            versions = self.resolve_versions(repo_path)
            yield f"Resolved {len(versions)} versions"

            if options.dry_run:
                for version in versions:
                    yield f"Would build {version.label} from {version.source_ref} into {version.directory}/"
                    summary.results.append(BuildResult(version=version, status=BuildStatus.DRY_RUN))
                return summary

            yield from self._publish(repo_path, versions, branch, options, summary)
        except CommandError as e:
            summary.abort(e.stage, str(e))
            raise

        return summary

    def _publish(
        self,
        repo_path: str,
        versions: List[Version],
        branch: str,
        options: PublishOptions,
        summary: PublishSummary,
    ) -> Generator[str, None, None]:
        """Build into fresh worktrees and commit the result."""
        publish_config = self.config.get("publish", {})
        builder_config = self.config.get("builder", {})
        project = options.project or project_name(self.config, repo_path)

        manager = WorktreeManager(
            repo_path,
            git_client=self.git,
            workdir=options.workdir,
            keep=options.keep_worktrees or options.no_commit,
        )
        with manager:
            source = SourceCheckout(manager, manager.acquire_source())
            output = manager.acquire_output(branch)

            index = IndexComposer(output, project, publish_config.get("index_filename") or "index.md")
            index.begin()

            builder = VersionBuilder(
                source,
                output,
                self.site_builder,
                project,
                title_template=builder_config.get("title_template") or "{project} {label} docs",
            )

            for version in versions:
                yield f"Building {version.label} ({version.source_ref})..."
                try:
                    result = builder.build(version)
                except BuildFailure as e:
                    logger.error(f"Build failed for {version.source_ref}: {e}")
                    result = BuildResult(version=version, status=BuildStatus.FAILED, error=str(e))

                summary.add_result(result)
                index.add(result)

                if result.status == BuildStatus.SKIPPED:
                    yield f"Skipped {version.source_ref} (no build configuration)"
                elif result.status == BuildStatus.FAILED:
                    yield f"Failed {version.source_ref}"
                else:
                    yield f"Built {version.label} into {version.directory}/"

            if options.no_commit:
                summary.output_worktree = str(output)
                yield f"Left output in {output} for a manual commit"
                return

            title = options.message or publish_config.get("commit_message") or "Publish documentation"
            try:
                summary.commit = PublishCommit(output, self.git).commit(summary.commit_message(title))
                yield f"Committed {summary.commit[:12]} to {branch}"
            except EmptyCommit:
                summary.empty_commit = True
                yield f"Nothing changed on {branch}"
