"""Installer that only records what it would have installed."""

from __future__ import annotations

import logging
import threading

from parinstall.core.dependency.graph import PackageNode
from parinstall.installers.base import Installer

logger = logging.getLogger(__name__)


class DryRunInstaller(Installer):
    """Logs each package instead of installing it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._installed: list[str] = []

    @property
    def name(self) -> str:
        return "dry-run"

    @property
    def installed(self) -> list[str]:
        """Return package names in the order they were "installed"."""
        with self._lock:
            return list(self._installed)

    def install(self, node: PackageNode) -> None:
        logger.info("Would install %s from %s", node.name, node.download_url or "CPAN")
        with self._lock:
            self._installed.append(node.name)
