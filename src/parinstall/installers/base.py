"""Installer interface: the task body run once per resolved package."""

from __future__ import annotations

from abc import ABC, abstractmethod

from parinstall.core.dependency.graph import PackageNode


class Installer(ABC):
    """Installs one resolved package.

    Instances are called from worker threads, possibly several at once, and
    must be safe for that. An installer is also a callable, so it can be
    passed directly as the scheduler's task.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier shown in reports (e.g. 'cpanm')."""

    @abstractmethod
    def install(self, node: PackageNode) -> None:
        """Install *node*.

        Raises:
            InstallError: If the package could not be installed.
        """

    def __call__(self, node: PackageNode) -> None:
        self.install(node)
