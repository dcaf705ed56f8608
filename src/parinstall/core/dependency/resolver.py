"""Recursive, memoized dependency resolution against a package registry.

Expands a mapping of requirement name -> version constraint into a graph of
``PackageNode`` instances by querying the registry for each name and then
for the release that ships it, following runtime ``requires`` edges.

The registry's own choice of release is trusted as-is: version constraints
are carried on the nodes but never used to pick among releases. Lookups are
serial and blocking, one name at a time.

A name the registry cannot resolve is logged and omitted together with the
subtree it would have pulled in; resolution of its siblings continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Union

from parinstall.core.dependency.builtins import BuiltinFilter
from parinstall.core.dependency.graph import DependencyGraph, PackageNode, Requirement
from parinstall.exceptions import ResolutionLookupError
from parinstall.registry.base import RegistryClient

logger = logging.getLogger(__name__)

Requirements = Union[Mapping[str, str], Iterable[Requirement]]

# name -> node, scoped to one top-level resolve() call.
ResolutionMemo = dict[str, PackageNode]


# ---------------------------------------------------------------------------
# ResolutionStats
# ---------------------------------------------------------------------------


@dataclass
class ResolutionStats:
    """What happened during one resolution run.

    Attributes:
        looked_up: Names queried against the registry, in query order.
        skipped_builtin: Names skipped as ignored or part of the perl core.
        failed: Name -> reason for every lookup that failed.
    """

    looked_up: list[str] = field(default_factory=list)
    skipped_builtin: set[str] = field(default_factory=set)
    failed: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# DependencyResolver
# ---------------------------------------------------------------------------


class DependencyResolver:
    """Builds a dependency graph by querying a registry.

    Args:
        registry: Client used for module and release lookups.
        builtin_filter: Decides which names are built in. Defaults to a
            ``BuiltinFilter`` with the standard ignore and core sets.
    """

    def __init__(
        self,
        registry: RegistryClient,
        builtin_filter: BuiltinFilter | None = None,
    ) -> None:
        self._registry = registry
        self._filter = builtin_filter or BuiltinFilter()
        self.last_stats = ResolutionStats()

    def resolve(self, requirements: Requirements) -> dict[str, PackageNode]:
        """Resolve *requirements* into a shared-reference dependency graph.

        Args:
            requirements: Mapping of name -> version constraint, or an
                iterable of ``Requirement``.

        Returns:
            Mapping covering the requested names that resolved, each pointing
            into the shared graph. Built-in names and names whose lookup
            failed are absent.
        """
        self.last_stats = ResolutionStats()
        memo: ResolutionMemo = {}
        perl_core: set[str] = set()
        return self._resolve_level(_as_mapping(requirements), memo, perl_core)

    def resolve_graph(self, requirements: Requirements) -> DependencyGraph:
        """Like ``resolve`` but wrap the result in a ``DependencyGraph``."""
        return DependencyGraph(self.resolve(requirements))

    def _resolve_level(
        self,
        requirements: Mapping[str, str],
        memo: ResolutionMemo,
        perl_core: set[str],
    ) -> dict[str, PackageNode]:
        """Resolve one level of requirements, recursing into each new node.

        *perl_core* collects names the registry placed in the perl
        distribution; like *memo* it spans the whole run, so each is looked
        up once.
        """
        level: dict[str, PackageNode] = {}
        stats = self.last_stats

        for name, constraint in requirements.items():
            if name in memo:
                level[name] = memo[name]
                continue

            if name in perl_core or self._filter.should_skip(name):
                stats.skipped_builtin.add(name)
                continue

            requirement = Requirement(name, constraint or "")
            logger.info("Looking up %s %s", name, requirement.version_constraint)
            stats.looked_up.append(name)

            try:
                module = self._registry.lookup_module(name)
                if self._filter.is_core_distribution(module.distribution):
                    logger.info("Skipping %s: ships with perl", name)
                    perl_core.add(name)
                    stats.skipped_builtin.add(name)
                    continue
                # A constrained requirement lets the registry pick the
                # distribution's release; an unconstrained one pins the
                # exact release the module lookup reported as latest.
                if requirement.is_constrained:
                    release = self._registry.lookup_release(module.distribution)
                else:
                    release = self._registry.lookup_release(module.release_path)
            except ResolutionLookupError as exc:
                logger.warning("Skipping %s: %s", name, exc.reason)
                stats.failed[name] = exc.reason
                continue

            node = PackageNode(name=name, version_constraint=requirement.version_constraint)
            # Registered before recursing so a cycle back to this name binds
            # the in-progress node instead of recursing forever.
            level[name] = memo[name] = node
            children = self._resolve_level(
                release.runtime_requirements(), memo, perl_core
            )

            node.dependencies = children
            node.download_url = release.download_url

        return level


def _as_mapping(requirements: Requirements) -> dict[str, str]:
    if isinstance(requirements, Mapping):
        return {str(name): str(constraint or "") for name, constraint in requirements.items()}
    return {req.name: req.version_constraint for req in requirements}
