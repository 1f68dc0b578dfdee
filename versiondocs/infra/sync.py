"""
Deletion-aware directory sync for versiondocs.

Mirrors one version's rendered output into its subdirectory of the output
tree. Everything under the destination that is not in the source is
removed; nothing outside the destination is touched, so sibling version
directories stay byte-identical.
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


@dataclass
class SyncStats:
    """Counts from one sync."""
    files_copied: int = 0
    files_deleted: int = 0
    dirs_deleted: int = 0


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def sync_tree(source: Path, destination: Path) -> SyncStats:
    """
    Make ``destination`` an exact copy of ``source``.

    Files are always recopied rather than compared by timestamp; git
    decides afterwards whether content changed. Symlinks are recreated
    as symlinks.

    Args:
        source: Rendered output directory
        destination: Version subdirectory inside the output tree

    Returns:
        SyncStats with copy/delete counts
    """
    source = Path(source)
    destination = Path(destination)
    if not source.is_dir():
        raise NotADirectoryError(f"Sync source is not a directory: {source}")

    stats = SyncStats()

    if destination.is_symlink() or (destination.exists() and not destination.is_dir()):
        destination.unlink()
    destination.mkdir(parents=True, exist_ok=True)

    expected = set()
    for dirpath, dirnames, filenames in os.walk(source):
        rel_dir = Path(dirpath).relative_to(source)
        target_dir = destination / rel_dir

        for name in sorted(dirnames):
            src = Path(dirpath) / name
            dst = target_dir / name
            expected.add(rel_dir / name)
            if src.is_symlink():
                # os.walk lists symlinked directories but does not descend
                if dst.exists() or dst.is_symlink():
                    _remove(dst)
                os.symlink(os.readlink(src), dst)
                stats.files_copied += 1
                continue
            if dst.is_symlink() or (dst.exists() and not dst.is_dir()):
                _remove(dst)
            dst.mkdir(exist_ok=True)

        for name in sorted(filenames):
            src = Path(dirpath) / name
            dst = target_dir / name
            expected.add(rel_dir / name)
            if dst.is_symlink() or dst.is_dir():
                _remove(dst)
            if src.is_symlink():
                if dst.exists():
                    dst.unlink()
                os.symlink(os.readlink(src), dst)
            else:
                shutil.copyfile(src, dst)
                shutil.copymode(src, dst)
            stats.files_copied += 1

    # Bottom-up so emptied directories can go too
    for dirpath, dirnames, filenames in os.walk(destination, topdown=False):
        rel_dir = Path(dirpath).relative_to(destination)
        for name in filenames:
            if rel_dir / name not in expected:
                (Path(dirpath) / name).unlink()
                stats.files_deleted += 1
        for name in dirnames:
            path = Path(dirpath) / name
            if rel_dir / name in expected:
                continue
            if path.is_symlink():
                path.unlink()
                stats.files_deleted += 1
            else:
                shutil.rmtree(path)
                stats.dirs_deleted += 1

    logger.debug(
        f"Synced {source} -> {destination}: {stats.files_copied} copied, "
        f"{stats.files_deleted} deleted"
    )
    return stats
