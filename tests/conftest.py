"""Shared fixtures: an in-memory SiteStore and transient model builders."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from sitefront.errors import StoreError
from sitefront.models import Post, Product, Site, SiteModule
from sitefront.models.post import POST_PUBLISHED

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_site(host: str = "alpha.example.com", **kwargs) -> Site:
    fields = {
        "id": str(uuid4()),
        "domain_id": str(uuid4()),
        "subdomain": host.split(".", 1)[0],
        "full_domain": host,
        "name": "Alpha Reviews",
        "is_active": True,
        "config": {},
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    fields.update(kwargs)
    return Site(**fields)


def make_module(site: Site, kind: str, display_order: int, content=None, enabled: bool = True) -> SiteModule:
    return SiteModule(
        site_id=site.id,
        kind=kind,
        enabled=enabled,
        display_order=display_order,
        content=content if content is not None else {},
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )


def make_product(site: Site, slug: str, rank: int, **kwargs) -> Product:
    fields = {
        "id": str(uuid4()),
        "site_id": site.id,
        "slug": slug,
        "name": slug.upper(),
        "rank": rank,
        "show_in_ranking": True,
        "is_active": True,
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    fields.update(kwargs)
    return Product(**fields)


def make_post(site: Site, slug: str, days: int = 0, **kwargs) -> Post:
    """Post published ``days`` after the base time."""
    when = BASE_TIME + timedelta(days=days)
    fields = {
        "id": str(uuid4()),
        "site_id": site.id,
        "slug": slug,
        "title": slug.replace("-", " ").title(),
        "status": POST_PUBLISHED,
        "tags": [],
        "published_at": when,
        "created_at": when,
        "updated_at": when,
    }
    fields.update(kwargs)
    return Post(**fields)


class FakeStore:
    """SiteStore over plain lists. ``failing`` names reads that raise StoreError."""

    def __init__(self, sites=(), modules=(), products=(), posts=(), failing=()):
        self.sites = list(sites)
        self.modules = list(modules)
        self.products = list(products)
        self.posts = list(posts)
        self.failing = set(failing)

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise StoreError(f"{name} unavailable")

    async def get_site_by_host(self, host):
        self._check("sites")
        return next((s for s in self.sites if s.full_domain == host), None)

    async def list_modules(self, site_id):
        self._check("modules")
        return [m for m in self.modules if m.site_id == site_id]

    async def list_active_products(self, site_id):
        self._check("products")
        return [p for p in self.products if p.site_id == site_id and p.is_active]

    async def get_product_by_slug(self, site_id, slug):
        self._check("products")
        # returns inactive rows too; the catalog must filter them
        return next((p for p in self.products if p.site_id == site_id and p.slug == slug), None)

    async def list_published_posts(self, site_id, category=None, tag=None):
        self._check("posts")
        posts = [p for p in self.posts if p.site_id == site_id and p.status == POST_PUBLISHED]
        if category is not None:
            posts = [p for p in posts if p.category == category]
        if tag is not None:
            posts = [p for p in posts if tag in (p.tags or [])]
        return sorted(posts, key=lambda p: p.published_at, reverse=True)

    async def get_published_post(self, site_id, slug):
        self._check("posts")
        return next(
            (
                p
                for p in self.posts
                if p.site_id == site_id and p.slug == slug and p.status == POST_PUBLISHED
            ),
            None,
        )


@pytest.fixture
def site() -> Site:
    return make_site()


@pytest.fixture
def store(site) -> FakeStore:
    return FakeStore(sites=[site])
