"""On-disk response cache for registry lookups.

``CachingTransport`` wraps the real ``httpx`` transport: successful GET
responses are stored under the cache directory, keyed by the SHA-256 of the
request URL, and replayed on later runs without touching the network. Error
responses are never cached, so a transient failure is retried next run.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

import httpx

from parinstall.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CACHE_SUFFIX: str = ".json"


class ResponseCache:
    """Directory of cached response bodies.

    Args:
        directory: Cache root. Created on first use.

    Raises:
        ConfigurationError: If the directory cannot be created or is not
            a directory.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(
                f"Cannot use cache directory {self._dir}: {exc}"
            ) from exc

    @property
    def directory(self) -> Path:
        return self._dir

    @staticmethod
    def key_for(url: str) -> str:
        """Return the cache key for *url*."""
        return hashlib.sha256(url.encode("utf-8")).hexdigest()

    def _path(self, url: str) -> Path:
        return self._dir / f"{self.key_for(url)}{CACHE_SUFFIX}"

    def get(self, url: str) -> bytes | None:
        """Return the cached body for *url*, or None on a miss."""
        path = self._path(url)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def put(self, url: str, body: bytes) -> None:
        """Store *body* for *url*, replacing any previous entry."""
        path = self._path(url)
        tmp = path.with_suffix(".tmp")
        tmp.write_bytes(body)
        tmp.replace(path)

    def clear(self) -> int:
        """Delete every cached entry.

        Returns:
            Number of entries removed.
        """
        removed = 0
        for entry in self._dir.glob(f"*{CACHE_SUFFIX}"):
            entry.unlink()
            removed += 1
        return removed

    def __len__(self) -> int:
        return sum(1 for _ in self._dir.glob(f"*{CACHE_SUFFIX}"))


class CachingTransport(httpx.BaseTransport):
    """``httpx`` transport that serves GET requests from a ``ResponseCache``.

    Args:
        cache: Where bodies are stored.
        transport: The transport to call on a miss. Defaults to a plain
            ``httpx.HTTPTransport``.
    """

    def __init__(
        self,
        cache: ResponseCache,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._cache = cache
        self._transport = transport or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if request.method != "GET":
            return self._transport.handle_request(request)

        url = str(request.url)
        body = self._cache.get(url)
        if body is not None:
            logger.debug("Cache hit for %s", url)
            return _json_response(body, request)

        response = self._transport.handle_request(request)
        if response.status_code != 200:
            return response

        # The body is stored decoded, so the replayed response must not
        # carry the upstream Content-Encoding.
        try:
            body = response.read()
        finally:
            response.close()
        self._cache.put(url, body)
        logger.debug("Cached %s", url)
        return _json_response(body, request)

    def close(self) -> None:
        self._transport.close()


def _json_response(body: bytes, request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        content=body,
        headers={"Content-Type": "application/json"},
        request=request,
    )
