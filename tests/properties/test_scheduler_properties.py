"""Property-based tests for parallel dispatch.

Verifies on random acyclic graphs and worker counts:
- Exactly once: every reachable package is dispatched and run once
- Dependency order: a package is dispatched after all its dependencies
- Bounded concurrency: never more tasks in flight than workers
"""
from __future__ import annotations

import threading

from hypothesis import given, settings
from hypothesis import strategies as st

from parinstall.core.dependency import DependencyGraph, PackageNode
from parinstall.core.scheduler import run_graph


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


@st.composite
def acyclic_graphs(draw: st.DrawFn) -> DependencyGraph:
    """Build a DAG where node i may only depend on nodes j < i."""
    size = draw(st.integers(min_value=1, max_value=10))
    nodes = [PackageNode(f"Pkg{i:02d}") for i in range(size)]
    for i, node in enumerate(nodes[1:], start=1):
        for j in draw(st.lists(st.integers(0, i - 1), max_size=3, unique=True)):
            node.dependencies[nodes[j].name] = nodes[j]
    root_ids = draw(st.lists(st.integers(0, size - 1), min_size=1, unique=True))
    return DependencyGraph({nodes[i].name: nodes[i] for i in root_ids})


workers = st.integers(min_value=1, max_value=4)


class _Counter:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.running = 0
        self.peak = 0
        self._lock = threading.Lock()

    def __call__(self, node: PackageNode) -> None:
        with self._lock:
            self.calls.append(node.name)
            self.running += 1
            self.peak = max(self.peak, self.running)
        with self._lock:
            self.running -= 1


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestDispatchProperties:
    """Invariants of ParallelScheduler on random DAGs."""

    @given(graph=acyclic_graphs(), size=workers)
    @settings(max_examples=60, deadline=None)
    def test_every_package_runs_exactly_once(
        self, graph: DependencyGraph, size: int
    ) -> None:
        task = _Counter()
        report = run_graph(graph, size, task)
        assert sorted(task.calls) == graph.names
        assert sorted(report.dispatch_order) == graph.names
        assert report.ok

    @given(graph=acyclic_graphs(), size=workers)
    @settings(max_examples=60, deadline=None)
    def test_dependencies_dispatched_first(
        self, graph: DependencyGraph, size: int
    ) -> None:
        report = run_graph(graph, size, _Counter())
        position = {name: i for i, name in enumerate(report.dispatch_order)}
        for parent, child in graph.edges():
            assert position[child] < position[parent]

    @given(graph=acyclic_graphs(), size=workers)
    @settings(max_examples=60, deadline=None)
    def test_concurrency_bounded_by_workers(
        self, graph: DependencyGraph, size: int
    ) -> None:
        task = _Counter()
        report = run_graph(graph, size, task)
        assert task.peak <= size
        assert report.peak_in_flight <= size

    @given(graph=acyclic_graphs())
    @settings(max_examples=40, deadline=None)
    def test_single_worker_runs_in_dispatch_order(self, graph: DependencyGraph) -> None:
        task = _Counter()
        report = run_graph(graph, 1, task)
        assert task.calls == report.dispatch_order
