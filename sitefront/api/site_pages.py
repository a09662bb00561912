"""Tenant page routes.

``HostRoutingMiddleware`` rewrites every non-admin request onto ``/site/{host}``,
so these handlers receive the normalized host as a path parameter.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from sitefront.auth.middleware import DbDep
from sitefront.config import settings
from sitefront.engine.composer import ComposedPage, PageComposer
from sitefront.engine.sitemap import SitemapGenerator, render_xml
from sitefront.errors import NotFoundError
from sitefront.storage.repositories import SiteStore, SqlSiteStore

router = APIRouter()

NO_STORE = {"Cache-Control": "no-store"}


def get_store(db: DbDep) -> SiteStore:
    return SqlSiteStore(db)


StoreDep = Annotated[SiteStore, Depends(get_store)]


def _html(page: ComposedPage) -> HTMLResponse:
    # tenant pages always reflect the latest saved configuration
    return HTMLResponse(page.render(), headers=NO_STORE)


@router.get("/site/{host}", response_class=HTMLResponse, include_in_schema=False)
@router.get("/site/{host}/", response_class=HTMLResponse)
async def home_page(host: str, store: StoreDep):
    """Landing page: enabled modules in display order."""
    page = await PageComposer(store, settings).compose_home(host)
    return _html(page)


@router.get("/site/{host}/products/{slug}", response_class=HTMLResponse)
async def product_page(host: str, slug: str, store: StoreDep):
    page = await PageComposer(store, settings).compose_product(host, slug)
    return _html(page)


@router.get("/site/{host}/blog", response_class=HTMLResponse)
async def blog_index(host: str, store: StoreDep):
    page = await PageComposer(store, settings).compose_blog_index(host)
    return _html(page)


@router.get("/site/{host}/blog/category/{category}", response_class=HTMLResponse)
async def blog_category(host: str, category: str, store: StoreDep):
    page = await PageComposer(store, settings).compose_category(host, category)
    return _html(page)


@router.get("/site/{host}/blog/tag/{tag}", response_class=HTMLResponse)
async def blog_tag(host: str, tag: str, store: StoreDep):
    page = await PageComposer(store, settings).compose_tag(host, tag)
    return _html(page)


@router.get("/site/{host}/blog/{slug}", response_class=HTMLResponse)
async def blog_post(host: str, slug: str, store: StoreDep):
    page = await PageComposer(store, settings).compose_post(host, slug)
    return _html(page)


@router.get("/site/{host}/sitemap.xml")
async def sitemap_xml(host: str, store: StoreDep):
    """Regenerated on every request from current data."""
    site = await PageComposer(store, settings).resolve_site(host)
    entries = await SitemapGenerator(store, settings).entries_for_site(site)
    return Response(render_xml(entries), media_type="application/xml", headers=NO_STORE)


@router.get("/site/{host}/{rest:path}", include_in_schema=False)
async def unknown_page(host: str, rest: str):
    raise NotFoundError(f"No page {rest!r} on {host}")


@router.get("/site/{rest:path}", include_in_schema=False)
async def missing_host(rest: str):
    # requests without a Host header land here as /site//...
    raise NotFoundError("Request has no tenant host")
