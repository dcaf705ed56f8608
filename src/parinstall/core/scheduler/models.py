"""Run report data models for the parallel scheduler.

Pure data holders with no scheduling logic, safe to import anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TaskResult:
    """Outcome of one install task.

    Attributes:
        name: Package the task installed.
        success: True if the task body returned without raising.
        duration: Wall-clock seconds the task body ran.
        error: Error message when ``success`` is False.
        error_type: Exception class name when ``success`` is False.
    """

    name: str
    success: bool
    duration: float = 0.0
    error: str = ""
    error_type: str = ""


# A failed task is a TaskResult with success=False.
TaskFailure = TaskResult


@dataclass
class RunReport:
    """Aggregate report of one scheduler run.

    Attributes:
        dispatch_order: Package names in the order their tasks were
            submitted to the pool.
        results: One ``TaskResult`` per dispatched task, in completion
            order.
        peak_in_flight: Highest number of tasks that ran at once.
        duration: Wall-clock seconds from first dispatch to barrier.
    """

    dispatch_order: list[str] = field(default_factory=list)
    results: list[TaskResult] = field(default_factory=list)
    peak_in_flight: int = 0
    duration: float = 0.0

    @property
    def failures(self) -> list[TaskResult]:
        return [r for r in self.results if not r.success]

    @property
    def succeeded(self) -> list[str]:
        return sorted(r.name for r in self.results if r.success)

    @property
    def ok(self) -> bool:
        """Return True if every dispatched task succeeded."""
        return not self.failures

    def result_for(self, name: str) -> TaskResult | None:
        for result in self.results:
            if result.name == name:
                return result
        return None
