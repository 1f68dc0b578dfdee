"""
Site builder infrastructure for versiondocs.

Wraps the external static-site generator (mdBook by default). The builder
is opaque: it is run as a subprocess in the directory holding its
configuration file and reports success through its exit status. The only
things versiondocs knows about its configuration are the title field and
where rendered output is written.
"""

import shutil
import subprocess
import tomllib
from pathlib import Path
from typing import List, Optional
import logging

import toml

from ..errors import BuildFailure

logger = logging.getLogger(__name__)

# Lines of builder stderr kept in a BuildFailure message
ERROR_TAIL_LINES = 20


class SiteBuilder:
    """
    Invokes the site generator for one checked-out source tree.

    Example:
        builder = SiteBuilder(["mdbook", "build"], "docs/.mdbook/book.toml")
        config_file = builder.config_file(source_root)
        if config_file.exists():
            builder.set_title(config_file, "jj v0.9.0 stable docs")
            rendered = builder.build(source_root)
    """

    def __init__(
        self,
        command: List[str],
        config_path: str = "docs/.mdbook/book.toml",
        default_build_dir: str = "book",
        timeout: Optional[int] = 600,
    ):
        """
        Initialize SiteBuilder.

        Args:
            command: Builder command line, run in the configuration directory
            config_path: Configuration file, relative to the source root
            default_build_dir: Output directory when the config names none
            timeout: Build timeout in seconds (None for no limit)
        """
        if isinstance(command, str):
            command = command.split()
        if not command:
            raise ValueError("Site builder command must not be empty")
        self.command = list(command)
        self.config_path = config_path
        self.default_build_dir = default_build_dir
        self.timeout = timeout

    @property
    def executable(self) -> str:
        return self.command[0]

    def config_file(self, source_root: Path) -> Path:
        return Path(source_root) / self.config_path

    def has_config(self, source_root: Path) -> bool:
        """True if the build configuration marker exists at this checkout."""
        return self.config_file(source_root).is_file()

    def _read_config(self, config_file: Path, ref: Optional[str] = None) -> dict:
        try:
            with open(config_file, 'rb') as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise BuildFailure(f"Cannot read {self.config_path}: {e}", ref=ref) from e

    def set_title(self, config_file: Path, title: str, ref: Optional[str] = None) -> None:
        """Rewrite ``book.title`` in the configuration file."""
        data = self._read_config(config_file, ref)
        book = data.setdefault("book", {})
        book["title"] = title
        try:
            with open(config_file, "w") as f:
                toml.dump(data, f)
        except OSError as e:
            raise BuildFailure(f"Cannot write {self.config_path}: {e}", ref=ref) from e
        logger.debug(f"Set title of {config_file} to {title!r}")

    def output_dir(self, config_file: Path, ref: Optional[str] = None) -> Path:
        """Where the builder writes rendered output for this configuration."""
        data = self._read_config(config_file, ref)
        build_dir = data.get("build", {}).get("build-dir") or self.default_build_dir
        return (Path(config_file).parent / build_dir).resolve()

    def build(self, source_root: Path, ref: Optional[str] = None) -> Path:
        """
        Run the builder against the checkout's configuration.

        Args:
            source_root: Root of the checked-out source tree
            ref: Ref being built, for diagnostics

        Returns:
            Path to the rendered output directory

        Raises:
            BuildFailure: If the builder cannot run, fails or produces no output
        """
        source_root = Path(source_root).resolve()
        config_file = self.config_file(source_root)
        output_dir = self.output_dir(config_file, ref)

        if not output_dir.is_relative_to(source_root):
            raise BuildFailure(
                f"Build directory {output_dir} is outside the source tree", ref=ref
            )
        # Output is removed before building, so it must not contain the sources
        if config_file.parent.resolve().is_relative_to(output_dir):
            raise BuildFailure(
                f"Build directory {output_dir} contains the documentation sources", ref=ref
            )

        # Never sync output left behind by a previous version
        if output_dir.exists():
            shutil.rmtree(output_dir)

        cmd_str = ' '.join(self.command)
        logger.debug(f"Running command in '{config_file.parent}': {cmd_str}")
        try:
            result = subprocess.run(
                self.command,
                cwd=str(config_file.parent),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise BuildFailure(f"Site builder not found: {self.executable}", ref=ref) from e
        except subprocess.TimeoutExpired as e:
            raise BuildFailure(f"{cmd_str} timed out after {self.timeout}s", ref=ref) from e

        if result.stdout and result.stdout.strip():
            logger.debug(result.stdout.strip())

        if result.returncode != 0:
            stderr = (result.stderr or '').strip()
            tail = '\n'.join(stderr.splitlines()[-ERROR_TAIL_LINES:])
            message = f"{cmd_str} exited with code {result.returncode}"
            if tail:
                message += f": {tail}"
            raise BuildFailure(message, ref=ref, output=stderr)

        if not output_dir.is_dir():
            raise BuildFailure(f"{cmd_str} produced no output at {output_dir}", ref=ref)

        return output_dir
