"""Sitemap / canonical URL generation.

The XML feed and the operator-facing URL groups are both built from
``SitemapGenerator.entries_for_site`` on every call; nothing is cached, so the
two views cannot drift apart.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote
from xml.etree import ElementTree as ET

from sitefront.config import Settings, settings as default_settings
from sitefront.engine.catalog import CatalogService
from sitefront.models import Post, Site
from sitefront.models.post import POST_PUBLISHED
from sitefront.storage.repositories import SiteStore

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

HOME_PRIORITY = 1.0
PRODUCT_PRIORITY = 0.8
POST_PRIORITY = 0.6


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    lastmod: datetime | None
    changefreq: str
    priority: float
    kind: str  # home|product|post


@dataclass(frozen=True)
class SitemapGroup:
    index: int
    entries: tuple[SitemapEntry, ...]

    @property
    def urls(self) -> list[str]:
        return [e.loc for e in self.entries]

    @property
    def text(self) -> str:
        """Newline-separated URLs, ready to paste into an indexing tool."""
        return "\n".join(self.urls)


def base_url(site: Site, scheme: str = "https") -> str:
    return f"{scheme}://{site.full_domain}"


def _post_recency_key(post: Post) -> tuple:
    # newest first; rows without timestamps go last
    published = post.published_at.timestamp() if post.published_at else float("-inf")
    updated = post.updated_at.timestamp() if post.updated_at else float("-inf")
    return (-published, -updated, str(post.id))


def group_entries(entries: list[SitemapEntry], size: int) -> list[SitemapGroup]:
    """Split entries into consecutive groups of at most ``size``."""
    if size <= 0:
        raise ValueError("group size must be positive")
    return [
        SitemapGroup(index=i // size, entries=tuple(entries[i : i + size]))
        for i in range(0, len(entries), size)
    ]


def flatten_groups(groups: list[SitemapGroup]) -> list[SitemapEntry]:
    return [entry for group in groups for entry in group.entries]


def render_xml(entries: list[SitemapEntry]) -> str:
    """sitemaps.org urlset document."""
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = entry.loc
        if entry.lastmod is not None:
            ET.SubElement(url, "lastmod").text = entry.lastmod.isoformat()
        ET.SubElement(url, "changefreq").text = entry.changefreq
        ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    body = ET.tostring(urlset, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body


class SitemapGenerator:
    """Derives the indexable URL set of a site from a ``SiteStore``."""

    def __init__(self, store: SiteStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or default_settings
        self.catalog = CatalogService(store)

    async def entries_for_site(self, site: Site) -> list[SitemapEntry]:
        """Home, then active products by rank, then published posts by recency."""
        root = base_url(site, self.settings.site_scheme)
        entries = [
            SitemapEntry(
                loc=root,
                lastmod=site.updated_at,
                changefreq="daily",
                priority=HOME_PRIORITY,
                kind="home",
            )
        ]

        products = await self.catalog.list_active_products(site.id)
        entries.extend(
            SitemapEntry(
                loc=f"{root}/products/{quote(p.slug)}",
                lastmod=p.updated_at,
                changefreq="weekly",
                priority=PRODUCT_PRIORITY,
                kind="product",
            )
            for p in products
        )

        posts = await self.store.list_published_posts(site.id)
        posts = sorted(
            (p for p in posts if p.status == POST_PUBLISHED), key=_post_recency_key
        )
        entries.extend(
            SitemapEntry(
                loc=f"{root}/blog/{quote(p.slug)}",
                lastmod=p.updated_at,
                changefreq="monthly",
                priority=POST_PRIORITY,
                kind="post",
            )
            for p in posts
        )

        logger.debug("Sitemap for %s: %d urls", site.full_domain, len(entries))
        return entries

    async def groups_for_site(self, site: Site) -> list[SitemapGroup]:
        entries = await self.entries_for_site(site)
        return group_entries(entries, self.settings.sitemap_group_size)
