"""Lockfile support: persist a resolved dependency graph."""

from parinstall.core.lockfile.lockfile import Lockfile
from parinstall.core.lockfile.models import LockedPackage

__all__ = ["LockedPackage", "Lockfile"]
