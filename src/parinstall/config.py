"""Run configuration and collaborator assembly.

``InstallConfig`` gathers every option a run recognises, validates them
before any network or install work starts, and builds the registry client
and installer the run uses.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from parinstall.core.dependency.builtins import BuiltinFilter
from parinstall.core.scheduler.scheduler import DEFAULT_WORKERS
from parinstall.exceptions import ConfigurationError
from parinstall.installers.base import Installer
from parinstall.installers.cpanm import CpanmInstaller
from parinstall.installers.dry_run import DryRunInstaller
from parinstall.manifest.cpanfile import DEFAULT_CPANFILE
from parinstall.registry.cache import CachingTransport, ResponseCache
from parinstall.registry.http_client import DEFAULT_TIMEOUT
from parinstall.registry.metacpan import METACPAN_API, MetaCPANClient

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR: str = "/tmp/cpan-install-parallel"


@dataclass
class InstallConfig:
    """Options for one parinstall run.

    Attributes:
        manifest_path: cpanfile to read.
        workers: Maximum concurrent install tasks.
        use_cache: Cache registry responses on disk.
        cache_dir: Where cached responses live.
        registry_url: MetaCPAN API root.
        timeout: Registry request timeout in seconds.
        skip: Extra module names never to resolve or install.
        dry_run: Log installs instead of running cpanm.
        cpanm: cpanm executable.
        notest: Pass ``--notest`` to cpanm.
        lockfile: Where to write the resolved graph, if anywhere.
    """

    manifest_path: Path = Path(DEFAULT_CPANFILE)
    workers: int = DEFAULT_WORKERS
    use_cache: bool = False
    cache_dir: Path = Path(DEFAULT_CACHE_DIR)
    registry_url: str = METACPAN_API
    timeout: float = DEFAULT_TIMEOUT
    skip: tuple[str, ...] = field(default_factory=tuple)
    dry_run: bool = False
    cpanm: str = "cpanm"
    notest: bool = False
    lockfile: Path | None = None

    def __post_init__(self) -> None:
        self.manifest_path = Path(self.manifest_path)
        self.cache_dir = Path(self.cache_dir)
        self.skip = tuple(self.skip)
        if self.lockfile is not None:
            self.lockfile = Path(self.lockfile)

    def validate(self, *, require_manifest: bool = True) -> None:
        """Check every option.

        Raises:
            ConfigurationError: On the first invalid option.
        """
        if not isinstance(self.workers, int) or self.workers < 1:
            raise ConfigurationError(
                f"Worker count must be at least 1, got {self.workers!r}"
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout!r}")
        if require_manifest and not self.manifest_path.is_file():
            raise ConfigurationError(f"Manifest not found: {self.manifest_path}")
        if self.use_cache and self.cache_dir.exists():
            if not self.cache_dir.is_dir():
                raise ConfigurationError(
                    f"Cache path is not a directory: {self.cache_dir}"
                )
            if not os.access(self.cache_dir, os.R_OK | os.W_OK | os.X_OK):
                raise ConfigurationError(
                    f"Cache directory is not readable and writable: {self.cache_dir}"
                )

    def build_filter(self) -> BuiltinFilter:
        return BuiltinFilter(extra_ignore=self.skip)

    def build_registry(self) -> MetaCPANClient:
        """Create the registry client, wrapped with the cache if enabled."""
        transport = None
        if self.use_cache:
            logger.info("Caching registry responses in %s", self.cache_dir)
            transport = CachingTransport(ResponseCache(self.cache_dir))
        return MetaCPANClient(
            self.registry_url, timeout=self.timeout, transport=transport
        )

    def build_installer(self) -> Installer:
        if self.dry_run:
            return DryRunInstaller()
        return CpanmInstaller(self.cpanm, notest=self.notest)
