"""Unit tests for host normalization and tenant path rewriting."""

import pytest

from sitefront.routing.host_router import (
    HostRoutingMiddleware,
    is_admin_host,
    normalize_host,
    rewrite_path,
)

ADMIN = ["localhost", "admin.example.com"]


def test_port_is_ignored():
    """Host with and without port resolve identically."""
    assert normalize_host("alpha.example.com:3000") == normalize_host("alpha.example.com")


def test_host_is_lowercased_and_trailing_dot_dropped():
    assert normalize_host("Alpha.Example.COM.") == "alpha.example.com"


def test_ipv6_literal_keeps_brackets():
    assert normalize_host("[::1]:8000") == "[::1]"


def test_www_kept_unless_configured():
    assert normalize_host("www.alpha.com") == "www.alpha.com"
    assert normalize_host("www.alpha.com", strip_www=True) == "alpha.com"


def test_missing_host_is_empty():
    assert normalize_host(None) == ""


def test_admin_hosts_match_by_substring():
    assert is_admin_host("localhost", ADMIN)
    assert is_admin_host("admin.example.com", ADMIN)
    assert not is_admin_host("alpha.example.com", ADMIN)


def test_admin_host_is_never_rewritten():
    assert rewrite_path("localhost", "/api/admin/sites", ADMIN) is None


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/", "/site/alpha.example.com/"),
        ("/products/x", "/site/alpha.example.com/products/x"),
        ("/api/anything", "/site/alpha.example.com/api/anything"),
        ("blog", "/site/alpha.example.com/blog"),
        ("/blog/", "/site/alpha.example.com/blog"),
        ("/products/x//", "/site/alpha.example.com/products/x"),
    ],
)
def test_tenant_paths_always_rewritten(path, expected):
    assert rewrite_path("alpha.example.com", path, ADMIN) == expected


def _scope(host: str, path: str) -> dict:
    return {
        "type": "http",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": [(b"host", host.encode())],
    }


@pytest.mark.asyncio
async def test_middleware_rewrites_scope_for_tenant():
    seen = {}

    async def app(scope, receive, send):
        seen.update(scope)

    middleware = HostRoutingMiddleware(app, admin_domains=ADMIN)
    await middleware(_scope("Alpha.example.com:8080", "/blog"), None, None)

    assert seen["path"] == "/site/alpha.example.com/blog"
    assert seen["raw_path"] == b"/site/alpha.example.com/blog"
    assert seen["state"]["site_host"] == "alpha.example.com"


@pytest.mark.asyncio
async def test_middleware_drops_trailing_slash_from_raw_path():
    seen = {}

    async def app(scope, receive, send):
        seen.update(scope)

    middleware = HostRoutingMiddleware(app, admin_domains=ADMIN)
    await middleware(_scope("alpha.example.com", "/blog/"), None, None)
    assert seen["path"] == "/site/alpha.example.com/blog"
    assert seen["raw_path"] == b"/site/alpha.example.com/blog"

    await middleware(_scope("alpha.example.com", "/"), None, None)
    assert seen["raw_path"] == b"/site/alpha.example.com/"


def test_missing_host_still_rewritten():
    assert rewrite_path("", "/blog", ADMIN) == "/site//blog"


@pytest.mark.asyncio
async def test_middleware_passes_admin_requests_through():
    seen = {}

    async def app(scope, receive, send):
        seen.update(scope)

    original = _scope("localhost:8000", "/api/admin/domains")
    middleware = HostRoutingMiddleware(app, admin_domains=ADMIN)
    await middleware(original, None, None)

    assert seen["path"] == "/api/admin/domains"
    assert "state" not in seen


@pytest.mark.asyncio
async def test_middleware_ignores_non_http_scopes():
    seen = {}

    async def app(scope, receive, send):
        seen.update(scope)

    middleware = HostRoutingMiddleware(app, admin_domains=ADMIN)
    await middleware({"type": "lifespan"}, None, None)
    assert seen == {"type": "lifespan"}
