"""Lockfile: a persisted snapshot of one resolution run.

Without a lockfile, every run re-resolves against whatever the registry
currently reports. Writing one records the release each package resolved
to and the edges between them, so two runs can be compared.

Determinism guarantee: ``to_json()`` sorts packages by name and all keys,
so two lockfiles for the same graph differ only in ``generated_at``.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from parinstall import _PRODUCT_ID
from parinstall.core.dependency.graph import DependencyGraph
from parinstall.core.lockfile.models import LockedPackage
from parinstall.exceptions import LockfileError


class Lockfile:
    """Resolved package set, serializable to ``parinstall-lock.json``.

    Example::

        graph = resolver.resolve_graph(requirements)
        Lockfile.from_graph(graph).write(Path("parinstall-lock.json"))
    """

    LOCKFILE_VERSION: str = "1.0"
    DEFAULT_NAME: str = "parinstall-lock.json"

    def __init__(self, registry: str = "") -> None:
        self._packages: dict[str, LockedPackage] = {}
        self.registry = registry

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_graph(cls, graph: DependencyGraph, registry: str = "") -> Lockfile:
        """Build a lockfile covering every node of *graph*."""
        lf = cls(registry=registry)
        for name, node in graph.nodes.items():
            lf.add_package(LockedPackage(
                name=name,
                version_constraint=node.version_constraint,
                download_url=node.download_url,
                dependencies=sorted(node.dependencies),
            ))
        return lf

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lockfile:
        """Deserialize a lockfile from the dict produced by ``to_dict``.

        Raises:
            LockfileError: If the structure is not a lockfile.
        """
        packages = data.get("packages") if isinstance(data, dict) else None
        if not isinstance(packages, dict):
            raise LockfileError("Lockfile has no 'packages' table")
        lf = cls(registry=str(data.get("registry", "")))
        for name, entry in packages.items():
            if not isinstance(entry, dict):
                raise LockfileError(f"Lockfile entry for {name!r} is not a table")
            lf.add_package(LockedPackage(
                name=name,
                version_constraint=str(entry.get("version_constraint", "")),
                download_url=str(entry.get("download_url", "")),
                dependencies=sorted(entry.get("dependencies", [])),
            ))
        return lf

    @classmethod
    def read(cls, path: Path) -> Lockfile:
        """Load a lockfile from disk.

        Raises:
            LockfileError: If the file is missing or not valid JSON.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise LockfileError(f"Cannot read lockfile {path}: {exc}") from exc
        return cls.from_dict(data)

    # -- Package management -------------------------------------------------

    def add_package(self, package: LockedPackage) -> None:
        self._packages[package.name] = package

    def get_package(self, name: str) -> LockedPackage | None:
        return self._packages.get(name)

    @property
    def package_count(self) -> int:
        return len(self._packages)

    @property
    def package_names(self) -> list[str]:
        return sorted(self._packages)

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        packages = {
            name: {
                "version_constraint": pkg.version_constraint,
                "download_url": pkg.download_url,
                "dependencies": sorted(pkg.dependencies),
            }
            for name, pkg in sorted(self._packages.items())
        }
        return {
            "lockfile_version": self.LOCKFILE_VERSION,
            "generated_by": _PRODUCT_ID,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "registry": self.registry,
            "packages": packages,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def write(self, path: Path) -> None:
        """Write the lockfile, creating parent directories as needed.

        Raises:
            LockfileError: If the path cannot be created or written.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_json() + "\n", encoding="utf-8")
        except OSError as exc:
            raise LockfileError(f"Cannot write lockfile {path}: {exc}") from exc
