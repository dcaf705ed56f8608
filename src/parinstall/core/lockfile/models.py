"""Lockfile data models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LockedPackage:
    """A single package entry in the lockfile.

    Attributes:
        name: Module name.
        version_constraint: Constraint the package was resolved under.
        download_url: Release tarball the registry reported.
        dependencies: Sorted names of direct dependencies.
    """

    name: str
    version_constraint: str = ""
    download_url: str = ""
    dependencies: list[str] = field(default_factory=list)
