"""Shared HTTP client utilities for registry clients.

Provides a thin wrapper around ``httpx.Client`` with standardised timeouts,
user-agent headers, and error handling, so every registry lookup behaves the
same way and is testable with ``httpx.MockTransport``.

Every failure is raised as ``ResolutionLookupError``; the resolver decides
what to do with it.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from parinstall import _PRODUCT_ID, __version__
from parinstall.exceptions import ResolutionLookupError

logger = logging.getLogger(__name__)

# Timeout for all registry HTTP requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = f"{_PRODUCT_ID}/{__version__}"


def build_client(
    base_url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create a configured ``httpx.Client`` for *base_url*.

    Args:
        base_url: Registry API root.
        timeout: Request timeout in seconds.
        transport: Optional transport, e.g. a caching or mock transport.

    Returns:
        A new client. The caller owns it and must close it.
    """
    return httpx.Client(
        base_url=base_url,
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
        transport=transport,
    )


def fetch_json(client: httpx.Client, path: str, *, name: str) -> dict[str, Any]:
    """GET *path* and parse the response as a JSON object.

    Args:
        client: Client created by ``build_client``.
        path: Path relative to the client's base URL.
        name: Package name the request is for, used in errors.

    Returns:
        Parsed JSON object.

    Raises:
        ResolutionLookupError: On timeouts, transport errors, non-2xx
            responses, invalid JSON, or a non-object payload.
    """
    try:
        resp = client.get(path)
        resp.raise_for_status()
        data = resp.json()
    except httpx.TimeoutException as exc:
        logger.warning("Timeout fetching %s", path)
        raise ResolutionLookupError(name, "registry request timed out") from exc
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.debug("HTTP %d from %s", status, path)
        reason = "not found" if status == 404 else f"HTTP {status}"
        raise ResolutionLookupError(name, reason) from exc
    except httpx.RequestError as exc:
        logger.warning("Request error for %s: %s", path, exc)
        raise ResolutionLookupError(name, f"request error: {exc}") from exc
    except ValueError as exc:
        raise ResolutionLookupError(name, "invalid JSON from registry") from exc

    if not isinstance(data, dict):
        raise ResolutionLookupError(name, "unexpected registry payload")
    return data
