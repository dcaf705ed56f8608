"""Installers: pluggable task bodies for the scheduler."""

from parinstall.installers.base import Installer
from parinstall.installers.cpanm import CpanmInstaller
from parinstall.installers.dry_run import DryRunInstaller

__all__ = ["CpanmInstaller", "DryRunInstaller", "Installer"]
