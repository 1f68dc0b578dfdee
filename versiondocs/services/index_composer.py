"""
Index page composition for versiondocs.
"""

import logging
from pathlib import Path

from ..domain.build import BuildResult

logger = logging.getLogger(__name__)

INDEX_HEADER = (
    "# `{project}` documentation\n"
    "Pick a version of `{project}` to view the documentation:\n"
    "\n"
)
INDEX_ENTRY = "- [{label}]({directory}/index.html)\n"


class IndexComposer:
    """
    Writes the manifest page linking every built version.

    The page is recreated by ``begin()`` on every run, then one line is
    appended per built version in resolution order.
    """

    def __init__(self, output_path: Path, project: str, filename: str = "index.md"):
        self.path = Path(output_path) / filename
        self.project = project
        self.entries = 0

    def begin(self) -> None:
        """Start a fresh index page (header only)."""
        self.path.write_text(INDEX_HEADER.format(project=self.project), encoding="utf-8")
        self.entries = 0

    def add(self, result: BuildResult) -> bool:
        """
        Append a link for a built version.

        Returns:
            True if a line was written
        """
        if not result.built:
            return False
        line = INDEX_ENTRY.format(label=result.version.label, directory=result.version.directory)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)
        self.entries += 1
        logger.debug(f"Indexed {result.version.directory}")
        return True
