"""
Build result domain objects for versiondocs.

Provides the per-version outcome of a publish run and the summary that
collects them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from .version import Version


class BuildStatus(Enum):
    """Outcome of building one version."""
    BUILT = "built"
    SKIPPED = "skipped"    # No build configuration at this ref
    FAILED = "failed"      # Site builder failed
    DRY_RUN = "dry_run"


@dataclass
class BuildResult:
    """
    What happened to one version during a publish run.
    """
    version: Version
    status: BuildStatus
    output_path: Optional[str] = None
    error: Optional[str] = None
    files_copied: int = 0
    files_deleted: int = 0

    @property
    def built(self) -> bool:
        return self.status == BuildStatus.BUILT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'type': 'version',
            'label': self.version.label,
            'ref': self.version.source_ref,
            'directory': self.version.directory,
            'status': self.status.value,
            'built': self.built,
        }
        if self.output_path:
            result['output_path'] = self.output_path
        if self.error:
            result['error'] = self.error
        if self.built:
            result['files_copied'] = self.files_copied
            result['files_deleted'] = self.files_deleted
        return result


@dataclass
class PublishSummary:
    """
    Summary of a publish run across all resolved versions.

    ``results`` keeps resolution order (head first); it drives both the
    index and the commit message.
    """
    branch: str = "gh-pages"
    dry_run: bool = False
    results: List[BuildResult] = field(default_factory=list)
    built: int = 0
    skipped: int = 0
    failed: int = 0
    commit: Optional[str] = None
    empty_commit: bool = False
    aborted_stage: Optional[str] = None
    abort_reason: Optional[str] = None
    output_worktree: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return self.aborted_stage is not None

    @property
    def success(self) -> bool:
        """True if the run completed and no version failed to build."""
        return not self.aborted and self.failed == 0

    def add_result(self, result: BuildResult) -> None:
        """Add a version outcome and update counts."""
        self.results.append(result)

        if result.status == BuildStatus.BUILT:
            self.built += 1
        elif result.status == BuildStatus.SKIPPED:
            self.skipped += 1
        elif result.status == BuildStatus.FAILED:
            self.failed += 1
            if result.error:
                self.errors.append(f"{result.version.label}: {result.error}")

    def abort(self, stage: str, reason: str) -> None:
        self.aborted_stage = stage
        self.abort_reason = reason

    def built_results(self) -> List[BuildResult]:
        return [r for r in self.results if r.built]

    def commit_message(self, title: str) -> str:
        """Commit message describing the run's net effect."""
        lines = [title, ""]
        for result in self.results:
            v = result.version
            if result.status == BuildStatus.BUILT:
                lines.append(f"- {v.directory}: {v.label}")
            elif result.status == BuildStatus.SKIPPED:
                lines.append(f"- {v.directory}: skipped (no build configuration)")
            elif result.status == BuildStatus.FAILED:
                lines.append(f"- {v.directory}: build failed")
        return "\n".join(lines).rstrip() + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'type': 'summary',
            'branch': self.branch,
            'total': len(self.results),
            'built': self.built,
            'skipped': self.skipped,
            'failed': self.failed,
            'dry_run': self.dry_run,
            'success': self.success,
            'commit': self.commit,
            'empty_commit': self.empty_commit,
            'errors': self.errors,
        }
        if self.aborted:
            result['aborted_stage'] = self.aborted_stage
            result['abort_reason'] = self.abort_reason
        if self.output_worktree:
            result['output_worktree'] = self.output_worktree
        return result
