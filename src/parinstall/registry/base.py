"""Base classes and data models for package registry clients.

Defines the ``RegistryClient`` abstract base class consumed by the
dependency resolver, along with the ``ModuleInfo``, ``ReleaseInfo`` and
``ReleaseDependency`` records it returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

# Release dependency phase excluded from resolution.
DEVELOP_PHASE: str = "develop"

# The only relationship that is resolved; recommends/suggests are not.
REQUIRES_RELATIONSHIP: str = "requires"


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModuleInfo:
    """Registry identity of a module.

    Attributes:
        name: Module name as looked up (e.g. "Moose::Role").
        distribution: Distribution that currently ships the module
            (e.g. "Moose").
        author: CPAN author id of the latest release (e.g. "ETHER").
        version: Module version in that release.
    """

    name: str
    distribution: str
    author: str
    version: str

    @property
    def release_path(self) -> str:
        """Return the ``AUTHOR/Distribution-Version`` release reference."""
        return f"{self.author}/{self.distribution}-{self.version}"


@dataclass(frozen=True)
class ReleaseDependency:
    """One prerequisite declared by a release.

    Attributes:
        module: Required module name.
        version: Minimum version or range, "0" for any.
        phase: configure, build, test, runtime or develop.
        relationship: requires, recommends, suggests or conflicts.
    """

    module: str
    version: str = "0"
    phase: str = "runtime"
    relationship: str = REQUIRES_RELATIONSHIP


@dataclass(frozen=True)
class ReleaseInfo:
    """Release metadata for one distribution release.

    Attributes:
        name: Release name (e.g. "Moose-2.2207").
        download_url: Tarball location.
        dependencies: Every prerequisite the release declares.
    """

    name: str
    download_url: str
    dependencies: tuple[ReleaseDependency, ...] = field(default_factory=tuple)

    def runtime_requirements(self) -> dict[str, str]:
        """Return the prerequisites the resolver follows.

        Keeps entries whose phase is not ``develop`` and whose relationship
        is ``requires``. Configure, build and test requirements are kept;
        recommendations and author-only tooling are not.

        Returns:
            Mapping of module name -> version constraint.
        """
        return {
            dep.module: dep.version
            for dep in self.dependencies
            if dep.phase != DEVELOP_PHASE
            and dep.relationship == REQUIRES_RELATIONSHIP
        }


# ---------------------------------------------------------------------------
# Abstract client
# ---------------------------------------------------------------------------


class RegistryClient(ABC):
    """Abstract base class for package registry clients.

    Both lookups are synchronous and may block on network I/O. Any failure
    is raised as ``ResolutionLookupError``; clients do not retry.
    """

    @property
    @abstractmethod
    def registry_name(self) -> str:
        """Human-readable name of this registry (e.g. 'MetaCPAN')."""

    @abstractmethod
    def lookup_module(self, name: str) -> ModuleInfo:
        """Return the registry identity of module *name*.

        Raises:
            ResolutionLookupError: If the module is unknown or the lookup
                fails.
        """

    @abstractmethod
    def lookup_release(self, ref: str) -> ReleaseInfo:
        """Return release metadata for *ref*.

        Args:
            ref: A distribution name, in which case the registry picks its
                latest release, or an ``AUTHOR/Distribution-Version`` path.

        Raises:
            ResolutionLookupError: If the release is unknown or the lookup
                fails.
        """

    def close(self) -> None:
        """Release any network resources held by the client."""
