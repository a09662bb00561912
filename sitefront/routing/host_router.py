"""Host-based request routing.

Requests whose host matches an admin pattern are passed through untouched.
Every other request is treated as a tenant request and its path is rewritten
to ``/site/{host}{path}`` so the tenant page routes can resolve the site.
No database access happens here; an unknown host simply fails the lookup
further down.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)

SITE_PREFIX = "/site"


def normalize_host(raw_host: str | None, strip_www: bool = False) -> str:
    """Lowercase the host and drop any port (and optionally a leading www.)."""
    host = (raw_host or "").strip().lower()
    if host.startswith("["):
        # IPv6 literal: [::1]:8000
        end = host.find("]")
        host = host[: end + 1] if end != -1 else host
    else:
        host = host.split(":", 1)[0]
    host = host.rstrip(".")
    if strip_www and host.startswith("www."):
        host = host[4:]
    return host


def is_admin_host(host: str, admin_patterns: Iterable[str]) -> bool:
    """True when any admin pattern occurs in the host (substring match)."""
    return any(pattern and pattern.lower() in host for pattern in admin_patterns)


def rewrite_path(host: str, path: str, admin_patterns: Iterable[str]) -> str | None:
    """
    Return the internal path for a tenant request, or None for admin hosts.

    ``host`` must already be normalized.
    """
    if is_admin_host(host, admin_patterns):
        return None
    if not path.startswith("/"):
        path = "/" + path
    # /blog/ and /blog are the same page
    path = path.rstrip("/") or "/"
    return f"{SITE_PREFIX}/{host}{path}"


def _header(scope: dict[str, Any], name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


class HostRoutingMiddleware:
    """ASGI middleware that rewrites tenant requests onto the /site routes."""

    def __init__(
        self,
        app: Any,
        admin_domains: Iterable[str] = (),
        strip_www: bool = False,
    ):
        self.app = app
        self.admin_domains = tuple(admin_domains)
        self.strip_www = strip_www

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        host = normalize_host(_header(scope, b"host"), strip_www=self.strip_www)
        path = scope.get("path", "/")
        new_path = rewrite_path(host, path, self.admin_domains)
        if new_path is None:
            await self.app(scope, receive, send)
            return

        logger.debug("Rewriting %s%s -> %s", host, path, new_path)
        scope = dict(scope)
        scope["path"] = new_path
        raw_path = (scope.get("raw_path") or path.encode("utf-8")).rstrip(b"/") or b"/"
        scope["raw_path"] = f"{SITE_PREFIX}/{host}".encode("utf-8") + raw_path
        state = dict(scope.get("state") or {})
        state["site_host"] = host
        scope["state"] = state
        await self.app(scope, receive, send)
