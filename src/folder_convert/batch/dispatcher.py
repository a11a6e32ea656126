"""Batch conversion run: no-op filtering, dispatch and aggregate summary."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from folder_convert.batch.executor import WorkerPool
from folder_convert.convert import ConversionOutcome, ConversionPolicy, convert_task
from folder_convert.core import Task, filter_noops

logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    """One worker per logical CPU."""
    return os.cpu_count() or 1


@dataclass
class RunSummary:
    """Aggregate result of one conversion run.

    Counters are updated from worker threads and guarded by a lock.

    Attributes:
        submitted: Number of tasks sent to the workers.
        elapsed_seconds: Wall-clock duration of the run.
    """

    submitted: int = 0
    elapsed_seconds: float = 0.0

    _succeeded: int = field(default=0, init=False, repr=False)
    _failures: list[ConversionOutcome] = field(
        default_factory=list, init=False, repr=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    @property
    def succeeded(self) -> int:
        """Number of successful conversions (thread-safe)."""
        with self._lock:
            return self._succeeded

    @property
    def failed(self) -> int:
        """Number of failed conversions (thread-safe)."""
        with self._lock:
            return len(self._failures)

    @property
    def failures(self) -> list[ConversionOutcome]:
        """Outcomes of failed conversions (thread-safe copy)."""
        with self._lock:
            return list(self._failures)

    @property
    def all_succeeded(self) -> bool:
        """Check if every submitted task was converted."""
        return self.succeeded == self.submitted

    def record(self, outcome: ConversionOutcome) -> None:
        """Count one finished task (thread-safe)."""
        with self._lock:
            if outcome.success:
                self._succeeded += 1
            else:
                self._failures.append(outcome)


@dataclass
class Dispatcher:
    """Runs a list of conversion tasks on a fixed-size worker pool.

    Attributes:
        policy: Output and deletion policy for every task.
        max_workers: Default number of concurrent workers.
        converter: Converts one task; defaults to convert_task with policy.
        on_outcome: Optional callback invoked from the worker thread as
            each task finishes.
    """

    policy: ConversionPolicy = field(default_factory=ConversionPolicy)
    max_workers: int = field(default_factory=default_worker_count)
    converter: Callable[[Task], ConversionOutcome] | None = None
    on_outcome: Callable[[ConversionOutcome], None] | None = None

    def _convert(self, task: Task) -> ConversionOutcome:
        if self.converter is not None:
            return self.converter(task)
        return convert_task(task, self.policy)

    def _process(self, task: Task, summary: RunSummary) -> None:
        """Convert one task and record its outcome."""
        logger.debug("Converting %s -> %s", task.path, task.target_format)
        try:
            outcome = self._convert(task)
        except Exception as e:
            logger.exception("Unexpected error converting %s", task.path)
            outcome = ConversionOutcome.failed(task, e)

        summary.record(outcome)
        if self.on_outcome is not None:
            self.on_outcome(outcome)

    def execute(
        self, tasks: Iterable[Task], worker_count: int | None = None
    ) -> RunSummary:
        """Convert every task that needs it and wait for all of them.

        No-op tasks (source already in the target format) are dropped.
        The remaining tasks are queued in order; failed tasks are counted
        but never retried.

        Args:
            tasks: Tasks in scan order.
            worker_count: Number of concurrent workers, defaults to
                max_workers. Values below 1 run a single worker.

        Returns:
            RunSummary with submitted and succeeded counts and duration.
        """
        pending = filter_noops(tasks)
        workers = max(
            1, worker_count if worker_count is not None else self.max_workers
        )
        summary = RunSummary(submitted=len(pending))

        logger.debug("Dispatching %d tasks to %d workers", len(pending), workers)
        start = time.perf_counter()

        with WorkerPool[Task](max_workers=workers) as pool:
            completion = pool.run(pending, lambda task: self._process(task, summary))

        summary.elapsed_seconds = time.perf_counter() - start

        if completion.has_errors:
            logger.error(
                "%d tasks raised in the outcome callback", completion.error_count
            )
        logger.debug(
            "Run finished: %d/%d succeeded, %d handled by %d workers in %.2fs",
            summary.succeeded,
            summary.submitted,
            completion.total_processed,
            len(completion.processed),
            summary.elapsed_seconds,
        )
        return summary
