"""Bounded parallel scheduling of install tasks.

Public names::

    from parinstall.core.scheduler import ParallelScheduler, RunReport, run_graph
"""

from parinstall.core.scheduler.models import RunReport, TaskFailure, TaskResult
from parinstall.core.scheduler.pool import WorkerPool
from parinstall.core.scheduler.scheduler import (
    DEFAULT_WORKERS,
    ParallelScheduler,
    run_graph,
)

__all__ = [
    "DEFAULT_WORKERS",
    "ParallelScheduler",
    "RunReport",
    "TaskFailure",
    "TaskResult",
    "WorkerPool",
    "run_graph",
]
