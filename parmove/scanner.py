"""
Directory scanning.

Walks the source tree up to an optional depth and collects the regular files
to sort.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .extensions import split_extension


@dataclass(frozen=True)
class FileEntry:
    """A discovered regular file."""
    path: Path
    name: str
    ext: str | None  # lowercased, None when the name has no extension

    @classmethod
    def from_path(cls, path: Path) -> "FileEntry":
        path = Path(path)
        return cls(path=path, name=path.name, ext=split_extension(path.name))


@dataclass
class ScanResult:
    entries: list[FileEntry] = field(default_factory=list)
    directories_scanned: int = 0


def describe_depth(max_depth: int | None) -> str:
    """Human readable description of a depth bound."""
    if max_depth is None:
        return "Collecting files from all subdirectories (unlimited depth)"
    if max_depth == 0:
        return "Collecting files from current directory only"
    if max_depth == 1:
        return "Collecting files from current directory and immediate subdirectories"
    return f"Collecting files with maximum depth of {max_depth} levels"


def walk_files(
    root: Path,
    max_depth: int | None = None,
    follow_symlinks: bool = False,
    exclude: Iterable[Path] = (),
    log=None,
) -> ScanResult:
    """
    Collect every regular file beneath root.

    Files directly inside root are at depth 0, so max_depth=0 collects only
    root's own files and max_depth=None descends without limit.

    Symlinks are skipped unless follow_symlinks is set, in which case linked
    directories are descended and linked files collected.

    Entries that fail (permission denied, broken link, vanished during the
    walk) are reported to log as warnings and skipped.

    Args:
        root: Directory to walk.
        max_depth: Deepest directory level to collect files from.
        follow_symlinks: Follow symbolic links.
        exclude: Directories to prune (typically the output directory).
        log: Leveled log sink.

    Returns:
        ScanResult with entries in discovery order and the number of
        directories visited.
    """
    root = Path(root).resolve()
    excluded = {Path(p).resolve() for p in exclude}
    result = ScanResult()
    seen: set[str] = set()

    def on_error(err: OSError):
        if log is not None:
            log.warning(f"Failed to read directory entry: {err}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=follow_symlinks):
        current = Path(dirpath)

        if follow_symlinks:
            # Linked directories can form cycles
            real = os.path.realpath(dirpath)
            if real in seen:
                dirnames[:] = []
                continue
            seen.add(real)

        result.directories_scanned += 1

        depth = len(current.relative_to(root).parts)

        # 1. Prune subdirectories we must not enter
        if max_depth is not None and depth >= max_depth:
            dirnames[:] = []
        else:
            kept = []
            for d in dirnames:
                subdir = current / d
                if subdir.resolve() in excluded:
                    continue
                if not follow_symlinks and subdir.is_symlink():
                    continue
                kept.append(d)
            dirnames[:] = kept

        # 2. Collect files
        for filename in filenames:
            filepath = current / filename

            try:
                if filepath.is_symlink():
                    if not follow_symlinks:
                        continue
                    if not filepath.exists():
                        if log is not None:
                            log.warning(f"Skipping broken symlink: {filepath}")
                        continue
                if not filepath.is_file():
                    continue
            except OSError as e:
                if log is not None:
                    log.warning(f"Skipping inaccessible file: {filepath} ({e})")
                continue

            result.entries.append(FileEntry.from_path(filepath))

    return result
