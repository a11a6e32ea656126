"""Worker pool draining a shared task queue."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from queue import Queue
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

# Queued once per worker by close(); a worker that takes it exits
_CLOSED = object()

T = TypeVar("T")


@dataclass
class CompletionResult:
    """Result of waiting for all workers to finish.

    Attributes:
        processed: Number of items handled by each worker, by worker id.
        errors: List of (worker_id, exception) tuples raised by the handler.
    """

    processed: dict[int, int] = field(default_factory=dict)
    errors: list[tuple[int, Exception]] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if any handler call failed."""
        return len(self.errors) > 0

    @property
    def total_processed(self) -> int:
        """Number of items taken off the queue by all workers."""
        return sum(self.processed.values())

    @property
    def error_count(self) -> int:
        """Number of failed handler calls."""
        return len(self.errors)


@dataclass
class WorkerPool(Generic[T]):
    """Fixed number of threads consuming items from one FIFO queue.

    Every worker is started before the first item is queued. Workers keep
    taking items until close() is called and the queue is drained.

    Usage:
        with WorkerPool[Task](max_workers=4) as pool:
            pool.start(handler)
            for task in tasks:
                pool.put(task)
            pool.close()
            completion = pool.join()

    Attributes:
        max_workers: Number of concurrent workers.
    """

    max_workers: int
    _executor: ThreadPoolExecutor | None = field(default=None, init=False, repr=False)
    _queue: Queue[object] = field(default_factory=Queue, init=False, repr=False)
    _workers: dict[Future[int], int] = field(
        default_factory=dict, init=False, repr=False
    )
    _errors: list[tuple[int, Exception]] = field(
        default_factory=list, init=False, repr=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _closed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate worker count."""
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    def __enter__(self) -> WorkerPool[T]:
        """Enter context manager - start the executor."""
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="worker"
        )
        return self

    def __exit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object
    ) -> None:
        """Exit context manager - close the queue and wait for workers."""
        if self._workers and not self._closed:
            self.close()
        if self._executor:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _work(self, worker_id: int, handler: Callable[[T], object]) -> int:
        """Worker loop: handle queued items until the close marker arrives."""
        processed = 0

        while True:
            item = self._queue.get()
            if item is _CLOSED:
                break

            try:
                handler(item)  # type: ignore[arg-type]
            except Exception as e:
                logger.exception("Worker %d failed on %s", worker_id, item)
                with self._lock:
                    self._errors.append((worker_id, e))
            finally:
                processed += 1

        logger.debug("Worker %d finished after %d items", worker_id, processed)
        return processed

    def start(self, handler: Callable[[T], object]) -> None:
        """Launch all workers.

        Args:
            handler: Called once for every queued item, in a worker thread.
        """
        if self._executor is None:
            raise RuntimeError("WorkerPool must be used as context manager")
        if self._workers:
            raise RuntimeError("WorkerPool already started")

        for worker_id in range(self.max_workers):
            future = self._executor.submit(self._work, worker_id, handler)
            self._workers[future] = worker_id

    def put(self, item: T) -> None:
        """Queue an item for the next free worker."""
        if not self._workers:
            raise RuntimeError("WorkerPool must be started before queueing items")
        if self._closed:
            raise RuntimeError("WorkerPool is closed")
        self._queue.put(item)

    def close(self) -> None:
        """Signal that no more items will be queued."""
        if self._closed:
            return
        self._closed = True
        for _ in range(self.max_workers):
            self._queue.put(_CLOSED)

    def join(self) -> CompletionResult:
        """Block until every worker has drained the queue and returned.

        Returns:
            CompletionResult with per-worker counts and handler errors.
        """
        if not self._closed:
            raise RuntimeError("WorkerPool must be closed before join")

        done, _ = wait(self._workers)
        completion = CompletionResult()
        for future in done:
            completion.processed[self._workers[future]] = future.result()
        with self._lock:
            completion.errors.extend(self._errors)
        return completion

    def run(
        self, items: Iterable[T], handler: Callable[[T], object]
    ) -> CompletionResult:
        """Start workers, queue every item in order, close and join."""
        self.start(handler)
        for item in items:
            self.put(item)
        self.close()
        return self.join()
