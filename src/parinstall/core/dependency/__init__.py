"""Dependency graph construction for parinstall.

Public names::

    from parinstall.core.dependency import (
        BuiltinFilter, DependencyGraph, DependencyResolver,
        PackageNode, Requirement,
    )
"""

from parinstall.core.dependency.builtins import (
    CORE_MODULES,
    DEFAULT_IGNORE,
    BuiltinFilter,
)
from parinstall.core.dependency.graph import (
    DependencyGraph,
    PackageNode,
    Requirement,
)
from parinstall.core.dependency.resolver import (
    DependencyResolver,
    ResolutionStats,
)

__all__ = [
    "BuiltinFilter",
    "CORE_MODULES",
    "DEFAULT_IGNORE",
    "DependencyGraph",
    "DependencyResolver",
    "PackageNode",
    "Requirement",
    "ResolutionStats",
]
