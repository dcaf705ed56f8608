"""Tests for the MetaCPAN registry client.

Uses ``httpx.MockTransport`` so every request goes through the real client
code without touching the network.
"""

from __future__ import annotations

from typing import Any, Callable
from urllib.parse import unquote

import httpx
import pytest

from parinstall.exceptions import ResolutionLookupError
from parinstall.registry.base import ModuleInfo
from parinstall.registry.http_client import USER_AGENT
from parinstall.registry.metacpan import METACPAN_API, MetaCPANClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client(routes: dict[str, Any], seen: list[httpx.Request] | None = None) -> MetaCPANClient:
    """Build a client whose transport serves *routes* keyed by URL path."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        path = unquote(request.url.path)
        if path not in routes:
            return httpx.Response(404, json={"message": "Not found"})
        return httpx.Response(200, json=routes[path])

    return MetaCPANClient(transport=httpx.MockTransport(handler))


def _raising(exc_factory: Callable[[httpx.Request], Exception]) -> MetaCPANClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return MetaCPANClient(transport=httpx.MockTransport(handler))


MOOSE_MODULE = {
    "name": "Moose.pm",
    "distribution": "Moose",
    "author": "ETHER",
    "version": "2.2206",
}

MOOSE_RELEASE = {
    "name": "Moose-2.2206",
    "download_url": "https://cpan.metacpan.org/authors/id/E/ET/ETHER/Moose-2.2206.tar.gz",
    "dependency": [
        {"module": "Class::Load", "version": "0.09", "phase": "runtime",
         "relationship": "requires"},
        {"module": "Test::Fatal", "version": "0.001", "phase": "test",
         "relationship": "requires"},
        {"module": "Dist::Zilla", "version": "5", "phase": "develop",
         "relationship": "requires"},
        {"module": "Devel::PartialDump", "version": "0", "phase": "runtime",
         "relationship": "recommends"},
    ],
}


# ---------------------------------------------------------------------------
# Module lookups
# ---------------------------------------------------------------------------


class TestLookupModule:
    """Tests for MetaCPANClient.lookup_module."""

    def test_returns_module_info(self) -> None:
        client = _client({"/v1/module/Moose": MOOSE_MODULE})
        module = client.lookup_module("Moose")
        assert module == ModuleInfo(
            name="Moose", distribution="Moose", author="ETHER", version="2.2206"
        )
        assert module.release_path == "ETHER/Moose-2.2206"

    def test_namespaced_module(self) -> None:
        client = _client({
            "/v1/module/Class::Load": {
                "distribution": "Class-Load", "author": "ETHER", "version": "0.25",
            },
        })
        assert client.lookup_module("Class::Load").distribution == "Class-Load"

    def test_numeric_version_is_stringified(self) -> None:
        client = _client({
            "/v1/module/Foo": {"distribution": "Foo", "author": "A", "version": 1.5},
        })
        assert client.lookup_module("Foo").version == "1.5"

    def test_missing_version_is_empty(self) -> None:
        client = _client({
            "/v1/module/Foo": {"distribution": "Foo", "author": "A", "version": None},
        })
        assert client.lookup_module("Foo").version == ""

    def test_unknown_module_is_not_found(self) -> None:
        client = _client({})
        with pytest.raises(ResolutionLookupError, match="not found") as info:
            client.lookup_module("No::Such")
        assert info.value.name == "No::Such"

    def test_document_without_distribution_fails(self) -> None:
        client = _client({"/v1/module/Foo": {"author": "A"}})
        with pytest.raises(ResolutionLookupError, match="distribution"):
            client.lookup_module("Foo")

    def test_sends_user_agent(self) -> None:
        seen: list[httpx.Request] = []
        client = _client({"/v1/module/Moose": MOOSE_MODULE}, seen)
        client.lookup_module("Moose")
        assert seen[0].headers["User-Agent"] == USER_AGENT
        assert str(seen[0].url).startswith(METACPAN_API)


# ---------------------------------------------------------------------------
# Release lookups
# ---------------------------------------------------------------------------


class TestLookupRelease:
    """Tests for MetaCPANClient.lookup_release."""

    def test_latest_release_by_distribution(self) -> None:
        client = _client({"/v1/release/Moose": MOOSE_RELEASE})
        release = client.lookup_release("Moose")
        assert release.name == "Moose-2.2206"
        assert release.download_url.endswith("Moose-2.2206.tar.gz")
        assert len(release.dependencies) == 4

    def test_release_by_path(self) -> None:
        client = _client({"/v1/release/ETHER/Moose-2.2206": MOOSE_RELEASE})
        release = client.lookup_release("ETHER/Moose-2.2206")
        assert release.name == "Moose-2.2206"

    def test_wrapped_release_document(self) -> None:
        client = _client({"/v1/release/Moose": {"release": MOOSE_RELEASE}})
        assert client.lookup_release("Moose").name == "Moose-2.2206"

    def test_runtime_requirements_filter(self) -> None:
        client = _client({"/v1/release/Moose": MOOSE_RELEASE})
        reqs = client.lookup_release("Moose").runtime_requirements()
        assert reqs == {"Class::Load": "0.09", "Test::Fatal": "0.001"}

    def test_malformed_dependencies_are_skipped(self) -> None:
        client = _client({
            "/v1/release/Foo": {
                "name": "Foo-1.0",
                "download_url": "https://cpan.example/Foo-1.0.tar.gz",
                "dependency": [{"version": "1"}, "junk", {"module": "Bar"}],
            },
        })
        deps = client.lookup_release("Foo").dependencies
        assert [d.module for d in deps] == ["Bar"]
        assert deps[0].version == "0"
        assert deps[0].phase == "runtime"
        assert deps[0].relationship == "requires"

    def test_non_list_dependency_fails(self) -> None:
        client = _client({"/v1/release/Foo": {"name": "Foo-1.0", "dependency": "x"}})
        with pytest.raises(ResolutionLookupError, match="malformed"):
            client.lookup_release("Foo")

    def test_missing_dependency_key_is_empty(self) -> None:
        client = _client({"/v1/release/Foo": {"name": "Foo-1.0"}})
        assert client.lookup_release("Foo").dependencies == ()


# ---------------------------------------------------------------------------
# Transport failures
# ---------------------------------------------------------------------------


class TestFailures:
    """Every transport failure surfaces as ResolutionLookupError."""

    def test_server_error(self) -> None:
        client = MetaCPANClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(503))
        )
        with pytest.raises(ResolutionLookupError, match="HTTP 503"):
            client.lookup_module("Moose")

    def test_timeout(self) -> None:
        client = _raising(lambda r: httpx.ReadTimeout("slow", request=r))
        with pytest.raises(ResolutionLookupError, match="timed out"):
            client.lookup_module("Moose")

    def test_connection_error(self) -> None:
        client = _raising(lambda r: httpx.ConnectError("refused", request=r))
        with pytest.raises(ResolutionLookupError, match="request error"):
            client.lookup_release("Moose")

    def test_invalid_json(self) -> None:
        client = MetaCPANClient(
            transport=httpx.MockTransport(
                lambda r: httpx.Response(200, content=b"<html>")
            )
        )
        with pytest.raises(ResolutionLookupError, match="invalid JSON"):
            client.lookup_module("Moose")

    def test_non_object_payload(self) -> None:
        client = MetaCPANClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[1, 2]))
        )
        with pytest.raises(ResolutionLookupError, match="unexpected"):
            client.lookup_module("Moose")


class TestLifecycle:

    def test_context_manager_closes_client(self) -> None:
        with _client({"/v1/module/Moose": MOOSE_MODULE}) as client:
            client.lookup_module("Moose")
        with pytest.raises(RuntimeError):
            client.lookup_module("Moose")

    def test_custom_base_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=MOOSE_MODULE)

        client = MetaCPANClient(
            "https://mirror.example/api/", transport=httpx.MockTransport(handler)
        )
        client.lookup_module("Moose")
        assert str(seen[0].url) == "https://mirror.example/api/module/Moose"
