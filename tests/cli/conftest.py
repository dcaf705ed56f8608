"""Shared fixtures for CLI tests.

The commands build their registry client through
``InstallConfig.build_registry``; ``fake_registry`` patches that method so
every command resolves against an in-memory registry instead of MetaCPAN.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from parinstall.config import InstallConfig

if TYPE_CHECKING:
    from conftest import FakeRegistry


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def fake_registry(
    registry: FakeRegistry, monkeypatch: pytest.MonkeyPatch
) -> FakeRegistry:
    """Serve Foo -> Baz and Bar -> Baz, matching the ``cpanfile`` fixture."""
    registry.add("Baz")
    registry.add("Foo", {"Baz": "0", "strict": "0"})
    registry.add("Bar", {"Baz": "1.0"})
    monkeypatch.setattr(InstallConfig, "build_registry", lambda self: registry)
    return registry
