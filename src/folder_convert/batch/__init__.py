"""Batch processing module for parallel conversions."""

from __future__ import annotations

from folder_convert.batch.dispatcher import (
    Dispatcher,
    RunSummary,
    default_worker_count,
)
from folder_convert.batch.executor import (
    CompletionResult,
    WorkerPool,
)

__all__ = [
    "CompletionResult",
    "Dispatcher",
    "RunSummary",
    "WorkerPool",
    "default_worker_count",
]
