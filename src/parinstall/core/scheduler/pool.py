"""Fixed-size worker pool with blocking admission.

The pool runs tasks on a ``ThreadPoolExecutor`` but admits them through a
bounded semaphore acquired by the *submitting* thread. When ``size`` tasks
are in flight, ``submit`` blocks the caller until one finishes; that
blocking is the only backpressure the scheduler has. ``join`` is the
completion barrier.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, TypeVar

from parinstall.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkerPool:
    """Runs at most ``size`` tasks at once.

    Args:
        size: Concurrency limit, at least 1.

    Raises:
        ConfigurationError: If *size* is less than 1.
    """

    def __init__(self, size: int) -> None:
        if not isinstance(size, int) or size < 1:
            raise ConfigurationError(f"Worker count must be at least 1, got {size!r}")
        self._size = size
        self._slots = threading.BoundedSemaphore(size)
        self._executor = ThreadPoolExecutor(
            max_workers=size, thread_name_prefix="parinstall-worker"
        )
        self._futures: list[Future[Any]] = []
        self._lock = threading.Lock()
        self._in_flight = 0
        self._peak = 0
        self._closed = False

    @property
    def size(self) -> int:
        return self._size

    @property
    def in_flight(self) -> int:
        """Return the number of tasks admitted and not yet finished."""
        with self._lock:
            return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """Return the highest ``in_flight`` value seen so far."""
        with self._lock:
            return self._peak

    def submit(self, fn: Callable[..., T], *args: Any) -> Future[T]:
        """Admit *fn* to the pool, blocking while the pool is saturated.

        Raises:
            RuntimeError: If the pool has already been joined.
        """
        if self._closed:
            raise RuntimeError("Cannot submit to a joined WorkerPool")

        self._slots.acquire()
        with self._lock:
            self._in_flight += 1
            self._peak = max(self._peak, self._in_flight)
        try:
            future = self._executor.submit(fn, *args)
        except BaseException:
            self._release()
            raise
        future.add_done_callback(self._on_done)
        self._futures.append(future)
        return future

    def _on_done(self, _future: Future[Any]) -> None:
        self._release()

    def _release(self) -> None:
        with self._lock:
            self._in_flight -= 1
        self._slots.release()

    def join(self) -> None:
        """Block until every submitted task has finished, then shut down."""
        if self._closed:
            return
        self._closed = True
        wait(self._futures)
        self._executor.shutdown(wait=True)
        logger.debug("Worker pool drained %d task(s)", len(self._futures))

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.join()
