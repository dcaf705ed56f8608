"""Dependency graph data structure and graph algorithms.

A resolution run produces a mapping of top-level names to ``PackageNode``
instances. Nodes are shared by reference: if A and B both depend on C, both
``dependencies`` maps hold the *same* C node, so the structure is a DAG (or,
with circular prerequisites, a general directed graph) rather than a tree.

``DependencyGraph`` is a read-only view over such a mapping. It builds the
node table keyed by name by following those shared references, and offers
edge listing, cycle detection, and a structural signature used to compare
two resolution runs.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterator, Mapping

# Constraints that mean "any version" in a cpanfile.
_UNCONSTRAINED = frozenset({"", "0"})


# ---------------------------------------------------------------------------
# Requirement & PackageNode
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Requirement:
    """A named requirement with an optional version constraint.

    Attributes:
        name: Module name (e.g. "Moose").
        version_constraint: Constraint as authored (e.g. ">= 2.0"). Empty
            or "0" means unconstrained.
    """

    name: str
    version_constraint: str = ""

    @property
    def is_constrained(self) -> bool:
        return self.version_constraint.strip() not in _UNCONSTRAINED


@dataclass(eq=False)
class PackageNode:
    """A resolved package and its direct dependency edges.

    Equality is identity: two nodes are the same node only if they are the
    same object, which is what the single-instance-per-name invariant is
    about.

    Attributes:
        name: Module name, unique within one resolution run.
        version_constraint: The constraint this node was first resolved
            under.
        download_url: Artifact location reported by the registry.
        dependencies: Direct children, keyed by name. Shared by reference
            across the graph.
    """

    name: str
    version_constraint: str = ""
    download_url: str = ""
    dependencies: dict[str, PackageNode] = field(default_factory=dict)

    def __repr__(self) -> str:
        # Children are listed by name only; a cycle would recurse forever.
        deps = ", ".join(sorted(self.dependencies))
        return (
            f"PackageNode(name={self.name!r}, "
            f"version_constraint={self.version_constraint!r}, "
            f"download_url={self.download_url!r}, dependencies=[{deps}])"
        )


# ---------------------------------------------------------------------------
# DependencyGraph: read-only view with a node table
# ---------------------------------------------------------------------------


class DependencyGraph:
    """The complete dependency graph of one resolution run.

    Wraps the top-level mapping returned by the resolver. The node table is
    computed once at construction; the graph is not expected to change
    afterwards and is safe for concurrent reads.
    """

    def __init__(self, roots: Mapping[str, PackageNode]) -> None:
        self._roots: dict[str, PackageNode] = dict(roots)
        self._nodes: dict[str, PackageNode] = {}
        for node in _iter_reachable(self._roots):
            self._nodes[node.name] = node

    @property
    def roots(self) -> dict[str, PackageNode]:
        """Return the top-level name -> node mapping."""
        return dict(self._roots)

    @property
    def nodes(self) -> dict[str, PackageNode]:
        """Return every reachable node keyed by name."""
        return dict(self._nodes)

    @property
    def names(self) -> list[str]:
        """Return sorted names of every reachable node."""
        return sorted(self._nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, name: str) -> PackageNode | None:
        """Return the node for *name*, or None if it is not in the graph."""
        return self._nodes.get(name)

    def edges(self) -> list[tuple[str, str]]:
        """Return every (dependent, dependency) name pair, sorted."""
        return sorted(
            (node.name, child)
            for node in self._nodes.values()
            for child in node.dependencies
        )

    def reverse_dependencies(self, name: str) -> list[str]:
        """Return sorted names of nodes that depend directly on *name*."""
        return sorted(
            node.name
            for node in self._nodes.values()
            if name in node.dependencies
        )

    def signature(self) -> dict[str, tuple[str, str, tuple[str, ...]]]:
        """Describe the graph structurally, independent of object identity.

        Two resolution runs against the same registry state produce equal
        signatures even though their node objects differ.

        Returns:
            Mapping of name -> (constraint, download URL, sorted child names).
        """
        return {
            name: (
                node.version_constraint,
                node.download_url,
                tuple(sorted(node.dependencies)),
            )
            for name, node in sorted(self._nodes.items())
        }

    def detect_cycles(self) -> list[list[str]]:
        """Detect circular dependencies using DFS colouring.

        Cycles are legal in a resolved graph (the resolver short-circuits
        them through its memo) but worth reporting: the scheduler can only
        dispatch one side of a cycle before the other.

        Returns:
            A list of cycles, each a list of names such as
            ["A", "B", "A"]. Empty if there are none.
        """
        adj: dict[str, list[str]] = defaultdict(list)
        for name, node in self._nodes.items():
            adj[name] = sorted(node.dependencies)

        WHITE, GRAY, BLACK = 0, 1, 2
        color: dict[str, int] = {name: WHITE for name in self._nodes}
        stack: list[str] = []
        cycles: list[list[str]] = []

        def _dfs(u: str) -> None:
            color[u] = GRAY
            stack.append(u)
            for v in adj[u]:
                if color.get(v, WHITE) == GRAY:
                    cycles.append(stack[stack.index(v):] + [v])
                elif color.get(v, WHITE) == WHITE:
                    _dfs(v)
            stack.pop()
            color[u] = BLACK

        for name in sorted(self._nodes):
            if color[name] == WHITE:
                _dfs(name)

        return cycles


def _iter_reachable(roots: Mapping[str, PackageNode]) -> Iterator[PackageNode]:
    """Yield every node reachable from *roots* once, by identity."""
    seen: set[int] = set()
    pending = list(roots.values())
    while pending:
        node = pending.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        pending.extend(node.dependencies.values())
