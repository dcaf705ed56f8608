"""Shared fixtures for parinstall tests.

``FakeRegistry`` is an in-memory ``RegistryClient``: modules map to a
distribution, and each distribution has one release with a dependency list.
It records every lookup so tests can assert on registry traffic.
"""

from __future__ import annotations

import pathlib

import pytest

from parinstall.core.dependency.builtins import CORE_MODULES, DEFAULT_IGNORE
from parinstall.exceptions import ResolutionLookupError
from parinstall.registry.base import (
    ModuleInfo,
    RegistryClient,
    ReleaseDependency,
    ReleaseInfo,
)


class FakeRegistry(RegistryClient):
    """In-memory registry for resolver tests."""

    def __init__(self) -> None:
        self.modules: dict[str, ModuleInfo] = {}
        self.releases: dict[str, ReleaseInfo] = {}
        self.module_lookups: list[str] = []
        self.release_lookups: list[str] = []
        self.broken_releases: set[str] = set()

    @property
    def registry_name(self) -> str:
        return "Fake"

    def add(
        self,
        name: str,
        deps: dict[str, str] | None = None,
        *,
        phase: str = "runtime",
        extra: list[ReleaseDependency] | None = None,
        distribution: str | None = None,
        version: str = "1.0",
        author: str = "TESTER",
        builtin: bool = False,
    ) -> ModuleInfo:
        """Register module *name* with runtime ``requires`` on *deps*.

        Names the resolver filters out must be flagged with *builtin*, so a
        test graph never loses a node to the filter by accident.
        """
        assert builtin or name not in DEFAULT_IGNORE | CORE_MODULES, (
            f"{name!r} is filtered by the resolver; pass builtin=True"
        )
        dist = distribution or name.replace("::", "-")
        module = ModuleInfo(name=name, distribution=dist, author=author, version=version)
        self.modules[name] = module
        dependencies = tuple(
            ReleaseDependency(module=dep, version=ver, phase=phase)
            for dep, ver in (deps or {}).items()
        ) + tuple(extra or ())
        release = ReleaseInfo(
            name=f"{dist}-{version}",
            download_url=f"https://cpan.example/{author}/{dist}-{version}.tar.gz",
            dependencies=dependencies,
        )
        # Reachable by distribution name and by release path.
        self.releases[dist] = release
        self.releases[module.release_path] = release
        return module

    def lookup_module(self, name: str) -> ModuleInfo:
        self.module_lookups.append(name)
        try:
            return self.modules[name]
        except KeyError:
            raise ResolutionLookupError(name, "not found") from None

    def lookup_release(self, ref: str) -> ReleaseInfo:
        self.release_lookups.append(ref)
        if ref in self.broken_releases or ref not in self.releases:
            raise ResolutionLookupError(ref, "not found")
        return self.releases[ref]


@pytest.fixture
def registry() -> FakeRegistry:
    """Create an empty FakeRegistry."""
    return FakeRegistry()


@pytest.fixture
def cpanfile(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a cpanfile requiring Foo (any) and Bar (>= 1.0)."""
    path = tmp_path / "cpanfile"
    path.write_text("requires 'Foo';\nrequires 'Bar', '>= 1.0';\n")
    return path
