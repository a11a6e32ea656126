"""Directory scanning for convertible audio and image files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from folder_convert.convert.invoker import CONVERTED_DIR_NAME
from folder_convert.core import MediaKind, ScanError, Task, classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScannedFile:
    """A file found by the scan together with its media kind."""

    path: Path
    kind: MediaKind


@dataclass
class ScanResult:
    """Snapshot of a directory scan.

    Attributes:
        files: Convertible files in scan order.
        has_folders: Whether the root contains subdirectories.
    """

    files: list[ScannedFile] = field(default_factory=list)
    has_folders: bool = False

    @property
    def kinds(self) -> set[MediaKind]:
        """Media kinds present in the scan."""
        return {f.kind for f in self.files}

    def count(self, kind: MediaKind) -> int:
        """Number of scanned files of the given kind."""
        return sum(1 for f in self.files if f.kind == kind)


def _list_entries(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ScanError(str(directory), e.strerror or str(e)) from e


def scan_directory(root: Path, recursive: bool = False) -> ScanResult:
    """Scan a directory for files with a known audio or image extension.

    Entries are visited in name order. In recursive mode subdirectories are
    scanned too, except "converted" output folders and symlinked
    directories.

    Args:
        root: Directory to scan.
        recursive: Whether to descend into subdirectories.

    Returns:
        ScanResult with the convertible files found.

    Raises:
        ScanError: If root is missing, not a directory or unreadable.
    """
    if not root.exists():
        raise ScanError(str(root), "directory does not exist")
    if not root.is_dir():
        raise ScanError(str(root), "not a directory")

    result = ScanResult()
    pending = [root]

    while pending:
        directory = pending.pop(0)
        subdirs: list[Path] = []

        for entry in _list_entries(directory):
            if entry.is_dir():
                if directory == root:
                    result.has_folders = True
                if entry.is_symlink():
                    logger.debug("Not following symlinked directory %s", entry)
                elif recursive and entry.name != CONVERTED_DIR_NAME:
                    subdirs.append(entry)
                continue

            kind = classify(entry)
            if kind is None:
                logger.debug("Skipping unsupported file %s", entry)
                continue
            result.files.append(ScannedFile(path=entry, kind=kind))

        # Depth-first, so files of one folder stay together
        pending[:0] = subdirs

    logger.debug("Scanned %s: %d convertible files", root, len(result.files))
    return result


def build_tasks(scan: ScanResult, targets: dict[MediaKind, str]) -> list[Task]:
    """Create conversion tasks for every scanned file with a target format.

    Args:
        scan: Result of scan_directory.
        targets: Target format per media kind. Kinds without an entry
            are not converted.

    Returns:
        Tasks in scan order, including no-op tasks.
    """
    return [
        Task(path=f.path, media_kind=f.kind, target_format=targets[f.kind])
        for f in scan.files
        if f.kind in targets
    ]
