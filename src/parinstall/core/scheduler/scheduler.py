"""Dependency-ordered dispatch of install tasks to a bounded worker pool.

The walk is depth-first over the resolved graph, with names sorted at each
level so the dispatch order is reproducible. A node's dependencies are
walked (and their tasks submitted) before the node's own task is submitted.
A single visited set spans the whole walk, so a node reachable through
several parents is dispatched exactly once.

Ordering caveat
---------------
Children are *submitted* before their parents; nothing waits for a child to
*finish* before its parent starts. With more than one worker, a dependent's
task can run while its dependency's task is still in flight. This matches
the behaviour the tool has always had. Callers that need completion
ordering must run with ``workers=1`` or make the task body tolerate it.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Mapping

from parinstall.core.dependency.graph import DependencyGraph, PackageNode
from parinstall.core.scheduler.models import RunReport, TaskResult
from parinstall.core.scheduler.pool import WorkerPool

logger = logging.getLogger(__name__)

DEFAULT_WORKERS: int = 4

Task = Callable[[PackageNode], object]


class ParallelScheduler:
    """Walks a dependency graph and runs one task per package.

    Args:
        workers: Maximum number of tasks running at once.
    """

    def __init__(self, workers: int = DEFAULT_WORKERS) -> None:
        self._workers = workers

    @property
    def workers(self) -> int:
        return self._workers

    def run(
        self,
        graph: Mapping[str, PackageNode] | DependencyGraph,
        task: Task,
    ) -> RunReport:
        """Dispatch *task* once for every node reachable from *graph*.

        Returns after every dispatched task has finished. A task that raises
        is recorded as a failure in the report; it does not stop the walk,
        its siblings, or its dependents.

        Args:
            graph: Top-level name -> node mapping, or a ``DependencyGraph``
                (whose roots are walked).
            task: Called with each ``PackageNode`` on a worker thread.

        Returns:
            A ``RunReport`` with dispatch order and per-task results.

        Raises:
            ConfigurationError: If the worker count is less than 1.
        """
        roots = graph.roots if isinstance(graph, DependencyGraph) else graph
        report = RunReport()
        results_lock = threading.Lock()
        started = time.monotonic()

        def _execute(node: PackageNode) -> None:
            logger.info("Starting %s %s", node.name, node.version_constraint)
            t0 = time.monotonic()
            try:
                task(node)
            except Exception as exc:
                result = TaskResult(
                    name=node.name,
                    success=False,
                    duration=time.monotonic() - t0,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                logger.warning("Failed %s: %s", node.name, exc, exc_info=True)
            else:
                result = TaskResult(
                    name=node.name, success=True, duration=time.monotonic() - t0
                )
                logger.info("Done with %s", node.name)
            with results_lock:
                report.results.append(result)

        with WorkerPool(self._workers) as pool:
            visited: set[str] = set()
            self._walk(roots, visited, pool, _execute, report)
            # Leaving the block joins the pool: the completion barrier.

        report.peak_in_flight = pool.peak_in_flight
        report.duration = time.monotonic() - started
        return report

    def _walk(
        self,
        level: Mapping[str, PackageNode],
        visited: set[str],
        pool: WorkerPool,
        execute: Callable[[PackageNode], None],
        report: RunReport,
    ) -> None:
        for name in sorted(level):
            if name in visited:
                continue
            visited.add(name)
            node = level[name]

            if node.dependencies:
                self._walk(node.dependencies, visited, pool, execute, report)

            logger.debug("Dispatching %s", name)
            report.dispatch_order.append(name)
            pool.submit(execute, node)


def run_graph(
    graph: Mapping[str, PackageNode] | DependencyGraph,
    workers: int,
    task: Task,
) -> RunReport:
    """Run *task* over *graph* with at most *workers* tasks at once."""
    return ParallelScheduler(workers).run(graph, task)
