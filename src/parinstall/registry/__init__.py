"""Package registry clients.

Public API::

    from parinstall.registry import RegistryClient, ModuleInfo, ReleaseInfo
    from parinstall.registry.metacpan import MetaCPANClient
    from parinstall.registry.cache import CachingTransport, ResponseCache
"""

from __future__ import annotations

from parinstall.registry.base import (
    ModuleInfo,
    RegistryClient,
    ReleaseDependency,
    ReleaseInfo,
)

__all__ = [
    "ModuleInfo",
    "RegistryClient",
    "ReleaseDependency",
    "ReleaseInfo",
]
