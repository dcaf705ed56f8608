"""MetaCPAN registry client.

Looks modules and releases up through the MetaCPAN REST API::

    GET /v1/module/{Module::Name}            -> distribution, author, version
    GET /v1/release/{Distribution}           -> latest release of a dist
    GET /v1/release/{AUTHOR}/{Dist-Version}  -> one specific release

Usage::

    with MetaCPANClient() as client:
        module = client.lookup_module("Moose")
        release = client.lookup_release(module.release_path)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from parinstall.exceptions import ResolutionLookupError
from parinstall.registry.base import (
    ModuleInfo,
    RegistryClient,
    ReleaseDependency,
    ReleaseInfo,
)
from parinstall.registry.http_client import DEFAULT_TIMEOUT, build_client, fetch_json

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

METACPAN_API: str = "https://fastapi.metacpan.org/v1"


# ---------------------------------------------------------------------------
# MetaCPAN client
# ---------------------------------------------------------------------------


class MetaCPANClient(RegistryClient):
    """Synchronous client for the MetaCPAN API.

    Args:
        base_url: API root. Defaults to ``METACPAN_API``.
        timeout: Per-request timeout in seconds.
        transport: Optional ``httpx`` transport. Pass a
            ``CachingTransport`` to enable the on-disk response cache, or an
            ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        base_url: str = METACPAN_API,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = build_client(
            base_url.rstrip("/") + "/", timeout=timeout, transport=transport
        )

    @property
    def registry_name(self) -> str:
        return "MetaCPAN"

    def lookup_module(self, name: str) -> ModuleInfo:
        data = fetch_json(self._client, f"module/{name}", name=name)
        return _data_to_module(name, data)

    def lookup_release(self, ref: str) -> ReleaseInfo:
        data = fetch_json(self._client, f"release/{ref}", name=ref)
        # Some API versions wrap the document in a "release" key.
        if isinstance(data.get("release"), dict):
            data = data["release"]
        return _data_to_release(ref, data)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> MetaCPANClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _data_to_module(name: str, data: dict[str, Any]) -> ModuleInfo:
    """Convert a MetaCPAN module document to ModuleInfo."""
    distribution = data.get("distribution")
    author = data.get("author")
    if not distribution or not author:
        raise ResolutionLookupError(name, "module document has no distribution")
    version = data.get("version")
    return ModuleInfo(
        name=name,
        distribution=str(distribution),
        author=str(author),
        version="" if version is None else str(version),
    )


def _data_to_release(ref: str, data: dict[str, Any]) -> ReleaseInfo:
    """Convert a MetaCPAN release document to ReleaseInfo."""
    raw_deps = data.get("dependency") or []
    if not isinstance(raw_deps, list):
        raise ResolutionLookupError(ref, "release dependency list is malformed")

    deps: list[ReleaseDependency] = []
    for entry in raw_deps:
        if not isinstance(entry, dict) or not entry.get("module"):
            logger.debug("Ignoring malformed dependency in %s: %r", ref, entry)
            continue
        deps.append(ReleaseDependency(
            module=str(entry["module"]),
            version=str(entry.get("version", "0")),
            phase=str(entry.get("phase", "runtime")),
            relationship=str(entry.get("relationship", "requires")),
        ))

    return ReleaseInfo(
        name=str(data.get("name", ref)),
        download_url=str(data.get("download_url", "")),
        dependencies=tuple(deps),
    )
