"""Page composer - turns a host into a fully rendered tenant page."""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, TypeVar

from sitefront.config import Settings, settings as default_settings
from sitefront.engine.catalog import CatalogService, product_card
from sitefront.engine.modules import (
    RenderContext,
    RenderedSection,
    get_definition,
    render_generic,
)
from sitefront.engine.templating import render_template
from sitefront.errors import PostNotFound, ProductNotFound, SiteNotFound, StoreError
from sitefront.models import Post, Site, SiteModule
from sitefront.schemas.content import SiteTheme, as_dict, decode_strings, text_field, theme_from_config
from sitefront.storage.repositories import SiteStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

RELATED_POST_LIMIT = 3


@dataclass
class PageMeta:
    title: str
    description: str = ""
    keywords: str = ""
    og_image: str = ""


@dataclass
class ComposedPage:
    """Result of composition: ordered sections plus the chrome around them."""

    site: Site
    theme: SiteTheme
    meta: PageMeta
    sections: list[RenderedSection] = field(default_factory=list)
    template: str = "pages/home.html"
    context: dict[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        return render_template(
            self.template,
            site=self.site,
            theme=self.theme,
            meta=self.meta,
            sections=self.sections,
            **self.context,
        )


def enabled_in_order(modules: list[SiteModule]) -> list[SiteModule]:
    """Enabled instances ascending by display_order; ties keep storage order."""
    enabled = [m for m in modules if m.enabled is True]
    return sorted(
        enabled,
        key=lambda m: m.display_order if isinstance(m.display_order, int) else 0,
    )


def page_meta(site: Site, title: str | None = None, description: str | None = None) -> PageMeta:
    seo = as_dict(as_dict(site.config).get("seo"))
    keywords = seo.get("keywords")
    if isinstance(keywords, list):
        keywords = ", ".join(decode_strings(keywords))
    elif not isinstance(keywords, str):
        keywords = ""
    return PageMeta(
        title=title or text_field(seo, "title", site.name),
        description=description or text_field(seo, "description", f"{site.name} - product reviews"),
        keywords=keywords,
        og_image=text_field(seo, "ogImage"),
    )


class PageComposer:
    """
    Compose tenant pages from a ``SiteStore``.

    The site read is the only fatal one. Module and catalog reads are bounded
    by ``read_timeout_seconds``; when they fail or time out the page is
    rendered with what is available.
    """

    def __init__(self, store: SiteStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or default_settings
        self.catalog = CatalogService(store)

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self.settings.read_timeout_seconds)

    async def _degraded(self, what: str, awaitable: Awaitable[list], site: Site) -> list:
        try:
            return await self._bounded(awaitable)
        except (StoreError, asyncio.TimeoutError) as exc:
            logger.warning("Reading %s for site %s failed, rendering without it: %r", what, site.id, exc)
            return []

    async def resolve_site(self, host: str) -> Site:
        """Active site for the host; any failure here is a not-found."""
        try:
            site = await self._bounded(self.store.get_site_by_host(host))
        except (StoreError, asyncio.TimeoutError) as exc:
            logger.error("Site lookup for %s failed: %r", host, exc)
            raise SiteNotFound(host) from exc
        if site is None or site.is_active is False:
            logger.info("No active site for host %s", host)
            raise SiteNotFound(host)
        return site

    def theme_for(self, site: Site) -> SiteTheme:
        return theme_from_config(site.config, site.name, datetime.now(timezone.utc).year)

    def render_sections(self, modules: list[SiteModule], ctx: RenderContext) -> list[RenderedSection]:
        sections: list[RenderedSection] = []
        for module in enabled_in_order(modules):
            definition = get_definition(module.kind)
            if definition is None:
                if self.settings.render_unknown_modules:
                    section = render_generic(module.kind, module.content, ctx)
                    if section is not None:
                        sections.append(section)
                else:
                    logger.debug("Skipping unknown module kind %r", module.kind)
                continue
            try:
                section = definition.render(as_dict(module.content), ctx)
            except Exception:
                # one bad module must not take the page down
                logger.exception("Render rule for %r failed; section omitted", module.kind)
                continue
            if section is not None:
                sections.append(section)
        return sections

    async def compose_home(self, host: str) -> ComposedPage:
        site = await self.resolve_site(host)
        modules = await self._degraded("modules", self.store.list_modules(site.id), site)
        products = await self._degraded(
            "products", self.catalog.list_active_products(site.id), site
        )
        theme = self.theme_for(site)
        sections = self.render_sections(modules, RenderContext(theme=theme, products=products))
        return ComposedPage(site=site, theme=theme, meta=page_meta(site), sections=sections)

    async def compose_product(self, host: str, slug: str) -> ComposedPage:
        site = await self.resolve_site(host)
        try:
            product = await self._bounded(self.catalog.get_product_by_slug(site.id, slug))
        except (StoreError, asyncio.TimeoutError) as exc:
            logger.warning("Product lookup %s/%s failed: %r", site.id, slug, exc)
            raise ProductNotFound(site.id, slug) from exc
        card = product_card(product)
        theme = self.theme_for(site)
        meta = page_meta(site, title=f"{card.name} | {theme.name}", description=card.tagline or None)
        return ComposedPage(
            site=site,
            theme=theme,
            meta=meta,
            template="pages/product.html",
            context={"product": card},
        )

    async def _posts(self, site: Site, category: str | None = None, tag: str | None = None) -> list[Post]:
        return await self._degraded(
            "posts", self.store.list_published_posts(site.id, category=category, tag=tag), site
        )

    async def compose_blog_index(self, host: str) -> ComposedPage:
        site = await self.resolve_site(host)
        posts = await self._posts(site)
        theme = self.theme_for(site)
        return ComposedPage(
            site=site,
            theme=theme,
            meta=page_meta(site, title=f"Blog | {theme.name}"),
            template="pages/post_list.html",
            context={
                "heading": "Blog",
                "label": "",
                "posts": posts,
                "categories": _categories(posts),
            },
        )

    async def compose_post(self, host: str, slug: str) -> ComposedPage:
        site = await self.resolve_site(host)
        try:
            post = await self._bounded(self.store.get_published_post(site.id, slug))
        except (StoreError, asyncio.TimeoutError) as exc:
            logger.warning("Post lookup %s/%s failed: %r", site.id, slug, exc)
            raise PostNotFound(site.id, slug) from exc
        if post is None:
            raise PostNotFound(site.id, slug)
        others = await self._posts(site)
        related = [p for p in others if p.id != post.id][:RELATED_POST_LIMIT]
        theme = self.theme_for(site)
        meta = page_meta(
            site,
            title=post.seo_title or f"{post.title} | {theme.name}",
            description=post.seo_description or post.excerpt,
        )
        if post.seo_keywords:
            meta.keywords = post.seo_keywords
        if post.featured_image:
            meta.og_image = post.featured_image
        return ComposedPage(
            site=site,
            theme=theme,
            meta=meta,
            template="pages/post.html",
            context={"post": post, "tags": decode_strings(post.tags), "related": related},
        )

    async def compose_category(self, host: str, category: str) -> ComposedPage:
        site = await self.resolve_site(host)
        posts = await self._posts(site, category=category)
        all_posts = await self._posts(site)
        theme = self.theme_for(site)
        return ComposedPage(
            site=site,
            theme=theme,
            meta=page_meta(site, title=f"{category} | {theme.name}"),
            template="pages/post_list.html",
            context={
                "heading": category,
                "label": "Category",
                "posts": posts,
                "categories": _categories(all_posts),
            },
        )

    async def compose_tag(self, host: str, tag: str) -> ComposedPage:
        site = await self.resolve_site(host)
        posts = await self._posts(site, tag=tag)
        theme = self.theme_for(site)
        return ComposedPage(
            site=site,
            theme=theme,
            meta=page_meta(site, title=f"#{tag} | {theme.name}"),
            template="pages/post_list.html",
            context={"heading": f"#{tag}", "label": "Tag", "posts": posts, "categories": []},
        )


def _categories(posts: list[Post]) -> list[tuple[str, int]]:
    """Category names with post counts, most used first then by name."""
    counts: dict[str, int] = {}
    for post in posts:
        if post.category:
            counts[post.category] = counts.get(post.category, 0) + 1
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
