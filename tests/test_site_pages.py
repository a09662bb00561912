"""HTTP tests for host-routed tenant pages."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeStore, make_module, make_post, make_product, make_site
from sitefront.api.site_pages import get_store
from sitefront.main import app

HOST = "alpha.example.com"


@pytest.fixture
def tenant():
    site = make_site(HOST, config={"name": "Alpha Reviews"})
    store = FakeStore(
        sites=[site],
        modules=[
            make_module(site, "hero", 1, {"title": "Top beds of the year"}),
            make_module(site, "products", 2, {"showCount": 5}),
            make_module(site, "painPoints", 3, {"points": []}),
        ],
        products=[
            make_product(site, "a", 3),
            make_product(site, "b", 1),
            make_product(site, "c", 2),
            make_product(site, "off", 0, is_active=False),
        ],
        posts=[make_post(site, "hello", 1, category="Guides", tags=["tips"])],
    )
    app.dependency_overrides[get_store] = lambda: store
    yield site, store
    app.dependency_overrides.clear()


def client_for(host: str) -> TestClient:
    return TestClient(app, base_url=f"http://{host}")


def test_home_page_renders_sections(tenant):
    response = client_for(HOST).get("/")
    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    assert "text/html" in response.headers["content-type"]
    body = response.text
    assert "Top beds of the year" in body
    assert body.index('data-slug="b"') < body.index('data-slug="c"') < body.index('data-slug="a"')
    assert 'data-slug="off"' not in body
    assert "module-pain-points" not in body


def test_port_does_not_change_resolution(tenant):
    assert client_for(f"{HOST}:8080").get("/").text == client_for(HOST).get("/").text


def test_unknown_host_is_404_page(tenant):
    response = client_for("nobody.example.com").get("/")
    assert response.status_code == 404
    assert "Page not found" in response.text


def test_deactivated_site_is_404_on_next_request(tenant):
    site, _ = tenant
    client = client_for(HOST)
    assert client.get("/").status_code == 200
    site.is_active = False
    assert client.get("/").status_code == 404
    assert client.get("/sitemap.xml").status_code == 404


def test_product_page(tenant):
    client = client_for(HOST)
    assert client.get("/products/b").status_code == 200
    assert client.get("/products/off").status_code == 404
    assert client.get("/products/missing").status_code == 404


def test_blog_routes(tenant):
    client = client_for(HOST)
    assert "Hello" in client.get("/blog").text
    assert client.get("/blog/hello").status_code == 200
    assert client.get("/blog/missing").status_code == 404
    assert "Hello" in client.get("/blog/category/Guides").text
    assert "Hello" in client.get("/blog/tag/tips").text


def test_trailing_slash_resolves_same_page(tenant):
    client = client_for(HOST)
    assert client.get("/blog/").text == client.get("/blog").text
    assert client.get("/blog/hello/").status_code == 200
    assert client.get("/products/b/").status_code == 200


def test_non_ascii_product_slug_resolves():
    site = make_site(HOST)
    store = FakeStore(
        sites=[site],
        modules=[make_module(site, "products", 1, {"showCount": 5})],
        products=[make_product(site, "睡眠床墊", 1, name="Cloud Bed")],
    )
    app.dependency_overrides[get_store] = lambda: store
    try:
        response = client_for(HOST).get("/products/睡眠床墊")
        home = client_for(HOST).get("/")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 200
    assert "Cloud Bed" in response.text
    assert 'href="/products/%E7%9D%A1%E7%9C%A0%E5%BA%8A%E5%A2%8A"' in home.text


@pytest.mark.asyncio
async def test_request_without_host_is_404_page():
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/blog",
        "raw_path": b"/blog",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "client": ("127.0.0.1", 50000),
        "server": ("127.0.0.1", 80),
    }
    sent = []

    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        sent.append(message)

    await app(scope, receive, send)

    assert sent[0]["status"] == 404
    body = b"".join(m.get("body", b"") for m in sent if m["type"] == "http.response.body")
    assert b"Page not found" in body


def test_unknown_path_is_404_page(tenant):
    response = client_for(HOST).get("/does/not/exist")
    assert response.status_code == 404
    assert "Page not found" in response.text


def test_sitemap_xml(tenant):
    response = client_for(HOST).get("/sitemap.xml")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    body = response.text
    assert body.count("<url>") == 1 + 3 + 1
    assert "https://alpha.example.com/products/off" not in body


def test_tenant_cannot_reach_admin_api(tenant):
    """Every non-admin host is rewritten, including /api paths."""
    response = client_for(HOST).get("/api/admin/domains")
    assert response.status_code == 404
    assert "Page not found" in response.text


def test_store_failure_on_site_lookup_is_404(tenant):
    _, store = tenant
    store.failing.add("sites")
    assert client_for(HOST).get("/").status_code == 404


def test_health_on_admin_host():
    response = client_for("localhost").get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "painPoints" in response.json()["modules"]
