"""HTTP tests for the publishing API and admin authentication."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from conftest import make_post, make_site
from sitefront.api import publish
from sitefront.auth import middleware
from sitefront.auth.middleware import bearer_token, generate_api_key, hash_api_key
from sitefront.config import settings
from sitefront.database import get_db
from sitefront.main import app
from sitefront.models import ApiKey, Post

RAW_KEY = "sk_site_test_key"


class FakeSession:
    def __init__(self):
        self.added = []
        self.flushes = 0

    def add(self, obj):
        self.added.append(obj)

    async def flush(self):
        self.flushes += 1

    async def commit(self):
        pass

    async def rollback(self):
        pass


@pytest.fixture
def publishing(monkeypatch):
    site = make_site("alpha.example.com")
    key = ApiKey(id="k1", site_id=site.id, name="ci", key_hash=hash_api_key(RAW_KEY), is_active=True)
    posts: dict[str, Post] = {}
    session = FakeSession()

    async def fake_get_db():
        yield session

    async def get_api_key_by_hash(db, key_hash):
        return key if key_hash == key.key_hash else None

    async def get_site(db, site_id):
        return site if site_id == site.id else None

    async def get_post_by_slug(db, site_id, slug):
        return posts.get(slug)

    async def list_site_posts(db, site_id):
        return list(posts.values())

    monkeypatch.setattr(middleware, "get_api_key_by_hash", get_api_key_by_hash)
    monkeypatch.setattr(publish, "get_site", get_site)
    monkeypatch.setattr(publish, "get_post_by_slug", get_post_by_slug)
    monkeypatch.setattr(publish, "list_site_posts", list_site_posts)
    app.dependency_overrides[get_db] = fake_get_db
    yield site, key, posts, session
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app, base_url="http://localhost")


def test_publish_creates_post(publishing, client):
    site, key, _, session = publishing
    response = client.post(
        "/api/posts/publish",
        json={"title": "Hello", "slug": "hello", "content": "<p>Hi</p>", "tags": ["a"]},
        headers={"Authorization": f"Bearer {RAW_KEY}"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["action"] == "created"
    assert data["url"] == "https://alpha.example.com/blog/hello"

    post = session.added[0]
    assert post.site_id == site.id
    assert post.status == "published"
    assert post.published_at is not None
    assert data["post_id"] == post.id
    assert key.last_used_at is not None


def test_publish_updates_existing_post(publishing, client):
    site, _, posts, session = publishing
    published = datetime(2024, 5, 1, tzinfo=timezone.utc)
    posts["hello"] = make_post(site, "hello", title="Old", published_at=published)
    response = client.post(
        "/api/posts/publish",
        json={"api_key": RAW_KEY, "title": "New", "slug": "hello"},
    )
    assert response.status_code == 200
    assert response.json()["action"] == "updated"
    assert posts["hello"].title == "New"
    assert posts["hello"].published_at == published
    assert session.added == []


def test_publish_update_keeps_fields_left_out(publishing, client):
    site, _, posts, _ = publishing
    posts["hello"] = make_post(
        site,
        "hello",
        title="Old",
        content="<p>Body</p>",
        excerpt="Short",
        category="Guides",
        tags=["sleep"],
        seo_title="Old SEO",
    )
    response = client.post(
        "/api/posts/publish",
        json={"api_key": RAW_KEY, "title": "New", "slug": "hello"},
    )
    assert response.status_code == 200
    post = posts["hello"]
    assert post.title == "New"
    assert post.content == "<p>Body</p>"
    assert post.excerpt == "Short"
    assert post.category == "Guides"
    assert post.tags == ["sleep"]
    assert post.seo_title == "Old SEO"
    assert post.status == "published"


def test_publish_url_percent_encodes_slug(publishing, client):
    response = client.post(
        "/api/posts/publish",
        json={"api_key": RAW_KEY, "title": "Sleep", "slug": "睡眠"},
    )
    assert response.status_code == 200
    assert response.json()["url"] == "https://alpha.example.com/blog/%E7%9D%A1%E7%9C%A0"


def test_publish_draft_has_no_publish_time(publishing, client):
    _, _, _, session = publishing
    response = client.post(
        "/api/posts/publish",
        json={"api_key": RAW_KEY, "title": "Draft", "slug": "draft", "status": "draft"},
    )
    assert response.status_code == 200
    assert session.added[0].published_at is None


def test_publish_requires_key(publishing, client):
    response = client.post("/api/posts/publish", json={"title": "T", "slug": "t"})
    assert response.status_code == 400


def test_publish_rejects_unknown_key(publishing, client):
    response = client.post(
        "/api/posts/publish",
        json={"title": "T", "slug": "t"},
        headers={"Authorization": "Bearer sk_site_wrong"},
    )
    assert response.status_code == 401


def test_publish_requires_title_and_slug(publishing, client):
    response = client.post("/api/posts/publish", json={"api_key": RAW_KEY, "title": "T"})
    assert response.status_code == 400


def test_list_posts_with_query_key(publishing, client):
    site, _, posts, _ = publishing
    posts["hello"] = make_post(site, "hello")
    response = client.get("/api/posts/publish", params={"api_key": RAW_KEY})
    assert response.status_code == 200
    assert [p["slug"] for p in response.json()["posts"]] == ["hello"]


def test_admin_requires_token(client):
    assert client.get("/api/admin/domains").status_code == 401
    response = client.get("/api/admin/domains", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 403


def test_api_key_helpers():
    key = generate_api_key()
    assert key.startswith("sk_site_")
    assert hash_api_key(key) == hash_api_key(key)
    assert hash_api_key(key) != hash_api_key(key + "x")
    assert bearer_token(f"Bearer {key}") == key
    assert bearer_token("Basic abc") is None
    assert bearer_token(None) is None
    assert settings.api_key_hash_salt
