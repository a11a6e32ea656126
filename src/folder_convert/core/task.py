"""Conversion task entity and no-op filtering."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from folder_convert.core.formats import MediaKind


@dataclass(frozen=True)
class Task:
    """Single file conversion in a batch.

    Attributes:
        path: Path to the source file.
        media_kind: Kind of media, selects the external tool.
        target_format: Target extension including the leading dot.
    """

    path: Path
    media_kind: MediaKind
    target_format: str

    def __post_init__(self) -> None:
        """Validate task fields after initialization."""
        if self.path == Path():
            raise ValueError("Task path must not be empty")
        if not self.target_format.startswith(".") or len(self.target_format) < 2:
            raise ValueError(
                f"target_format must start with '.', got {self.target_format!r}"
            )

    @property
    def source_format(self) -> str:
        """Current extension of the source file, lowercased."""
        return self.path.suffix.lower()

    @property
    def is_noop(self) -> bool:
        """Check if the source already has the target extension."""
        return self.source_format == self.target_format.lower()


def filter_noops(tasks: Iterable[Task]) -> list[Task]:
    """Drop tasks whose source already has the target extension.

    Order is preserved, so applying the filter twice yields the same list.

    Args:
        tasks: Tasks in scan order.

    Returns:
        Tasks that require an actual conversion.
    """
    return [task for task in tasks if not task.is_noop]
