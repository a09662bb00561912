"""Repository functions for domains, sites, modules, products, posts and API keys.

Read paths used while serving tenant pages go through ``SiteStore`` so the
engine can be handed any implementation; ``SqlSiteStore`` is the database one.
"""

import logging
from datetime import datetime, timezone
from typing import Protocol
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sitefront.errors import StoreError
from sitefront.models import ApiKey, Domain, Post, Product, Site, SiteModule
from sitefront.models.post import POST_PUBLISHED

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SiteStore(Protocol):
    """Read contract the engine depends on. Every read is scoped to one site."""

    async def get_site_by_host(self, host: str) -> Site | None: ...

    async def list_modules(self, site_id: str) -> list[SiteModule]: ...

    async def list_active_products(self, site_id: str) -> list[Product]: ...

    async def get_product_by_slug(self, site_id: str, slug: str) -> Product | None: ...

    async def list_published_posts(
        self,
        site_id: str,
        category: str | None = None,
        tag: str | None = None,
    ) -> list[Post]: ...

    async def get_published_post(self, site_id: str, slug: str) -> Post | None: ...


class SqlSiteStore:
    """``SiteStore`` backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _all(self, stmt) -> list:
        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StoreError(str(exc)) from exc

    async def _one(self, stmt):
        rows = await self._all(stmt)
        return rows[0] if rows else None

    async def get_site_by_host(self, host: str) -> Site | None:
        """Active site whose full domain equals the host."""
        return await self._one(
            select(Site).where(Site.full_domain == host, Site.is_active.is_(True))
        )

    async def list_modules(self, site_id: str) -> list[SiteModule]:
        return await self._all(
            select(SiteModule)
            .where(SiteModule.site_id == site_id)
            .order_by(SiteModule.display_order, SiteModule.created_at, SiteModule.kind)
        )

    async def list_active_products(self, site_id: str) -> list[Product]:
        return await self._all(
            select(Product)
            .where(Product.site_id == site_id, Product.is_active.is_(True))
            .order_by(Product.rank, Product.id)
        )

    async def get_product_by_slug(self, site_id: str, slug: str) -> Product | None:
        return await self._one(
            select(Product).where(
                Product.site_id == site_id,
                Product.slug == slug,
                Product.is_active.is_(True),
            )
        )

    async def list_published_posts(
        self,
        site_id: str,
        category: str | None = None,
        tag: str | None = None,
    ) -> list[Post]:
        """Published posts, newest first."""
        stmt = select(Post).where(Post.site_id == site_id, Post.status == POST_PUBLISHED)
        if category is not None:
            stmt = stmt.where(Post.category == category)
        if tag is not None:
            stmt = stmt.where(Post.tags.contains([tag]))
        stmt = stmt.order_by(
            Post.published_at.desc().nulls_last(),
            Post.updated_at.desc().nulls_last(),
            Post.id,
        )
        return await self._all(stmt)

    async def get_published_post(self, site_id: str, slug: str) -> Post | None:
        return await self._one(
            select(Post).where(
                Post.site_id == site_id,
                Post.slug == slug,
                Post.status == POST_PUBLISHED,
            )
        )


# ---------------------------------------------------------------------------
# Admin-side reads and writes
# ---------------------------------------------------------------------------


async def list_domains(db: AsyncSession) -> list[Domain]:
    result = await db.execute(select(Domain).order_by(Domain.name))
    return list(result.scalars().all())


async def get_domain(db: AsyncSession, domain_id: str) -> Domain | None:
    result = await db.execute(select(Domain).where(Domain.id == domain_id))
    return result.scalar_one_or_none()


async def get_domain_by_name(db: AsyncSession, domain: str) -> Domain | None:
    result = await db.execute(select(Domain).where(Domain.domain == domain))
    return result.scalar_one_or_none()


async def get_site(db: AsyncSession, site_id: str) -> Site | None:
    """Site by id, active or not."""
    result = await db.execute(select(Site).where(Site.id == site_id))
    return result.scalar_one_or_none()


async def get_site_by_full_domain(db: AsyncSession, full_domain: str) -> Site | None:
    result = await db.execute(select(Site).where(Site.full_domain == full_domain))
    return result.scalar_one_or_none()


async def create_site(
    db: AsyncSession,
    domain: Domain,
    subdomain: str,
    name: str,
    config: dict,
    modules: list[dict],
    user_id: str | None = None,
) -> Site:
    """Insert a site and seed one module row per registered kind."""
    now = utcnow()
    site = Site(
        id=str(uuid4()),
        user_id=user_id,
        domain_id=domain.id,
        subdomain=subdomain,
        full_domain=f"{subdomain}.{domain.domain}",
        name=name,
        is_active=True,
        config=config,
        created_at=now,
        updated_at=now,
    )
    db.add(site)
    await db.flush()
    for row in modules:
        db.add(
            SiteModule(
                site_id=site.id,
                kind=row["kind"],
                enabled=row["enabled"],
                display_order=row["display_order"],
                content=row["content"],
                created_at=now,
                updated_at=now,
            )
        )
    await db.flush()
    return site


async def get_module(db: AsyncSession, site_id: str, kind: str) -> SiteModule | None:
    result = await db.execute(
        select(SiteModule).where(SiteModule.site_id == site_id, SiteModule.kind == kind)
    )
    return result.scalar_one_or_none()


async def list_site_modules(db: AsyncSession, site_id: str) -> list[SiteModule]:
    return await SqlSiteStore(db).list_modules(site_id)


async def list_site_products(db: AsyncSession, site_id: str) -> list[Product]:
    """All products of a site including inactive ones, by rank."""
    result = await db.execute(
        select(Product).where(Product.site_id == site_id).order_by(Product.rank, Product.id)
    )
    return list(result.scalars().all())


async def get_product(db: AsyncSession, site_id: str, product_id: str) -> Product | None:
    result = await db.execute(
        select(Product).where(Product.site_id == site_id, Product.id == product_id)
    )
    return result.scalar_one_or_none()


async def get_product_any_state(db: AsyncSession, site_id: str, slug: str) -> Product | None:
    result = await db.execute(
        select(Product).where(Product.site_id == site_id, Product.slug == slug)
    )
    return result.scalar_one_or_none()


async def get_post_by_slug(db: AsyncSession, site_id: str, slug: str) -> Post | None:
    """Post by slug regardless of status."""
    result = await db.execute(select(Post).where(Post.site_id == site_id, Post.slug == slug))
    return result.scalar_one_or_none()


async def list_site_posts(db: AsyncSession, site_id: str) -> list[Post]:
    result = await db.execute(
        select(Post).where(Post.site_id == site_id).order_by(Post.created_at.desc())
    )
    return list(result.scalars().all())


async def get_api_key_by_hash(db: AsyncSession, key_hash: str) -> ApiKey | None:
    result = await db.execute(
        select(ApiKey).where(ApiKey.key_hash == key_hash, ApiKey.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def create_api_key(db: AsyncSession, site_id: str, name: str, key_hash: str) -> ApiKey:
    key = ApiKey(
        id=str(uuid4()),
        site_id=site_id,
        name=name,
        key_hash=key_hash,
        is_active=True,
        created_at=utcnow(),
    )
    db.add(key)
    await db.flush()
    return key
