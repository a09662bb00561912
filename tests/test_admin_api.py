"""HTTP tests for admin product import and sitemap groups."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeStore, make_product, make_site
from sitefront.api import admin
from sitefront.config import settings
from sitefront.database import get_db
from sitefront.main import app


class FakeSession:
    def __init__(self):
        self.added = []

    def add(self, obj):
        self.added.append(obj)

    async def flush(self):
        pass

    async def commit(self):
        pass

    async def rollback(self):
        pass


@pytest.fixture
def admin_site(monkeypatch):
    site = make_site("alpha.example.com")
    session = FakeSession()

    async def fake_get_db():
        yield session

    async def get_site(db, site_id):
        return site if site_id == site.id else None

    async def get_product_any_state(db, site_id, slug):
        return next((p for p in session.added if p.slug == slug), None)

    monkeypatch.setattr(admin, "get_site", get_site)
    monkeypatch.setattr(admin, "get_product_any_state", get_product_any_state)
    app.dependency_overrides[get_db] = fake_get_db
    yield site, session
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    client = TestClient(app, base_url="http://localhost")
    client.headers["Authorization"] = f"Bearer {settings.admin_api_token}"
    return client


def test_import_accepts_slugs_as_sent(admin_site, client):
    site, session = admin_site
    response = client.post(
        f"/api/admin/sites/{site.id}/products/import",
        json={
            "products": [
                {"slug": "睡眠床墊", "name": "Cloud Bed"},
                {"slug": "best_mattress", "name": "Best"},
                {"slug": "sleep-&-co.", "name": "Sleep & Co"},
            ]
        },
    )
    assert response.status_code == 200
    assert response.json() == {"created": 3, "updated": 0}
    assert [p.slug for p in session.added] == ["睡眠床墊", "best_mattress", "sleep-&-co."]


def test_import_rejects_slug_with_slash(admin_site, client):
    site, session = admin_site
    response = client.post(
        f"/api/admin/sites/{site.id}/products/import",
        json={"products": [{"slug": "a/b", "name": "A"}]},
    )
    assert response.status_code == 422
    assert session.added == []


def test_sitemap_groups_for_active_site(admin_site, client, monkeypatch):
    site, _ = admin_site
    store = FakeStore(sites=[site], products=[make_product(site, "睡眠床墊", 1)])
    monkeypatch.setattr(admin, "SqlSiteStore", lambda db: store)

    data = client.get(f"/api/admin/sites/{site.id}/sitemap").json()
    assert data["is_active"] is True
    assert data["total"] == 2
    assert data["groups"][0]["urls"] == [
        "https://alpha.example.com",
        "https://alpha.example.com/products/%E7%9D%A1%E7%9C%A0%E5%BA%8A%E5%A2%8A",
    ]


def test_sitemap_groups_empty_for_inactive_site(admin_site, client, monkeypatch):
    site, _ = admin_site
    site.is_active = False
    store = FakeStore(sites=[site], products=[make_product(site, "a", 1)])
    monkeypatch.setattr(admin, "SqlSiteStore", lambda db: store)

    response = client.get(f"/api/admin/sites/{site.id}/sitemap")
    assert response.status_code == 200
    data = response.json()
    assert data["is_active"] is False
    assert data["total"] == 0
    assert data["groups"] == []


def test_sitemap_groups_unknown_site(admin_site, client):
    assert client.get("/api/admin/sites/missing/sitemap").status_code == 404
