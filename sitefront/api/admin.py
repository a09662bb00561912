"""Admin endpoints - domains, sites, modules, products, sitemap groups, API keys."""

import logging
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, HTTPException, status

from sitefront.auth.middleware import AdminDep, DbDep, generate_api_key, hash_api_key
from sitefront.config import settings
from sitefront.engine.modules import default_modules, get_definition
from sitefront.engine.sitemap import SitemapGenerator
from sitefront.errors import ConflictError
from sitefront.models import Domain, Product, Site
from sitefront.models.site import default_site_config
from sitefront.schemas.admin import (
    CreateApiKeyRequest,
    CreateDomainRequest,
    CreateSiteRequest,
    DomainOut,
    ModuleOut,
    ProductImportRequest,
    ProductIn,
    ProductOut,
    SitemapGroupOut,
    SitemapGroupsOut,
    SiteOut,
    UpdateModuleRequest,
    UpdateSiteRequest,
)
from sitefront.storage.repositories import (
    SqlSiteStore,
    create_api_key,
    create_site,
    get_domain,
    get_domain_by_name,
    get_module,
    get_product,
    get_product_any_state,
    get_site,
    get_site_by_full_domain,
    list_domains,
    list_site_modules,
    list_site_products,
    utcnow,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _site_or_404(db, site_id: str) -> Site:
    site = await get_site(db, site_id)
    if not site:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
    return site


def _apply_product(product: Product, body: ProductIn) -> None:
    for name, value in body.model_dump().items():
        setattr(product, name, value)
    product.updated_at = utcnow()


@router.get("/domains", response_model=list[DomainOut])
async def get_domains(_: AdminDep, db: DbDep):
    return await list_domains(db)


@router.post("/domains", response_model=DomainOut, status_code=status.HTTP_201_CREATED)
async def create_domain(body: CreateDomainRequest, _: AdminDep, db: DbDep):
    """Register a root domain sites can be created under."""
    if await get_domain_by_name(db, body.domain):
        raise ConflictError(f"Domain {body.domain} already exists")
    domain = Domain(
        id=str(uuid4()),
        domain=body.domain,
        name=body.name,
        is_active=body.is_active,
        created_at=utcnow(),
    )
    db.add(domain)
    await db.flush()
    return domain


@router.post("/sites", response_model=SiteOut, status_code=status.HTTP_201_CREATED)
async def create_site_endpoint(body: CreateSiteRequest, _: AdminDep, db: DbDep):
    """Create a site under an active domain and seed every registered module."""
    domain = await get_domain(db, body.domain_id)
    if not domain or not domain.is_active:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Domain not found or inactive",
        )
    full_domain = f"{body.subdomain}.{domain.domain}"
    if await get_site_by_full_domain(db, full_domain):
        raise ConflictError(f"Hostname {full_domain} is already taken")

    year = datetime.now(timezone.utc).year
    site = await create_site(
        db,
        domain=domain,
        subdomain=body.subdomain,
        name=body.name,
        config=default_site_config(body.name, year),
        modules=default_modules(),
        user_id=body.user_id,
    )
    logger.info("Created site %s (%s)", site.id, site.full_domain)
    return site


@router.get("/sites/{site_id}", response_model=SiteOut)
async def get_site_endpoint(site_id: str, _: AdminDep, db: DbDep):
    return await _site_or_404(db, site_id)


@router.patch("/sites/{site_id}", response_model=SiteOut)
async def update_site(site_id: str, body: UpdateSiteRequest, _: AdminDep, db: DbDep):
    """Rename, (de)activate or replace the config document of a site."""
    site = await _site_or_404(db, site_id)
    if body.name is not None:
        site.name = body.name
    if body.is_active is not None:
        site.is_active = body.is_active
    if body.config is not None:
        site.config = body.config
    site.updated_at = utcnow()
    await db.flush()
    return site


@router.get("/sites/{site_id}/modules", response_model=list[ModuleOut])
async def get_modules(site_id: str, _: AdminDep, db: DbDep):
    await _site_or_404(db, site_id)
    return await list_site_modules(db, site_id)


@router.put("/sites/{site_id}/modules/{kind}", response_model=ModuleOut)
async def update_module(
    site_id: str, kind: str, body: UpdateModuleRequest, _: AdminDep, db: DbDep
):
    """Save one module instance. Content is stored as sent and checked at render time."""
    site = await _site_or_404(db, site_id)
    module = await get_module(db, site_id, kind)
    if not module:
        raise HTTPException(status_code=404, detail=f"Module {kind} not found for site")
    if get_definition(kind) is None:
        logger.warning("Saving module %r which has no render rule", kind)
    now = utcnow()
    if body.content is not None:
        module.content = body.content
    if body.enabled is not None:
        module.enabled = body.enabled
    if body.display_order is not None:
        module.display_order = body.display_order
    module.updated_at = now
    site.updated_at = now
    await db.flush()
    return module


@router.get("/sites/{site_id}/products", response_model=list[ProductOut])
async def get_products(site_id: str, _: AdminDep, db: DbDep):
    await _site_or_404(db, site_id)
    return await list_site_products(db, site_id)


@router.post(
    "/sites/{site_id}/products",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(site_id: str, body: ProductIn, _: AdminDep, db: DbDep):
    await _site_or_404(db, site_id)
    if await get_product_any_state(db, site_id, body.slug):
        raise ConflictError(f"Product slug {body.slug} already exists")
    product = Product(id=str(uuid4()), site_id=site_id, created_at=utcnow())
    _apply_product(product, body)
    db.add(product)
    await db.flush()
    return product


@router.put("/sites/{site_id}/products/{product_id}", response_model=ProductOut)
async def update_product(
    site_id: str, product_id: str, body: ProductIn, _: AdminDep, db: DbDep
):
    await _site_or_404(db, site_id)
    product = await get_product(db, site_id, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if body.slug != product.slug:
        other = await get_product_any_state(db, site_id, body.slug)
        if other and other.id != product.id:
            raise ConflictError(f"Product slug {body.slug} already exists")
    _apply_product(product, body)
    await db.flush()
    return product


@router.post("/sites/{site_id}/products/import")
async def import_products(
    site_id: str, body: ProductImportRequest, _: AdminDep, db: DbDep
):
    """Bulk upsert keyed on slug; the last occurrence of a repeated slug wins."""
    await _site_or_404(db, site_id)
    created = updated = 0
    for item in body.products:
        product = await get_product_any_state(db, site_id, item.slug)
        if product:
            updated += 1
        else:
            product = Product(id=str(uuid4()), site_id=site_id, created_at=utcnow())
            db.add(product)
            created += 1
        _apply_product(product, item)
        await db.flush()
    logger.info("Imported products for site %s: %d created, %d updated", site_id, created, updated)
    return {"created": created, "updated": updated}


@router.get("/sites/{site_id}/sitemap", response_model=SitemapGroupsOut)
async def sitemap_groups(site_id: str, _: AdminDep, db: DbDep):
    """Indexable URLs in groups for manual submission to search consoles.

    An inactive site has no public sitemap, so it gets no groups either.
    """
    site = await _site_or_404(db, site_id)
    groups = []
    if site.is_active:
        generator = SitemapGenerator(SqlSiteStore(db), settings)
        groups = await generator.groups_for_site(site)
    return SitemapGroupsOut(
        site_id=site.id,
        full_domain=site.full_domain,
        is_active=bool(site.is_active),
        total=sum(len(g.entries) for g in groups),
        group_size=settings.sitemap_group_size,
        groups=[
            SitemapGroupOut(index=g.index, count=len(g.entries), urls=g.urls, text=g.text)
            for g in groups
        ],
    )


@router.post("/sites/{site_id}/api-keys", status_code=status.HTTP_201_CREATED)
async def create_api_key_endpoint(
    site_id: str, body: CreateApiKeyRequest, _: AdminDep, db: DbDep
):
    """Issue a publishing key. The plain key is only returned here."""
    await _site_or_404(db, site_id)
    raw_key = generate_api_key()
    key = await create_api_key(db, site_id, body.name, hash_api_key(raw_key))
    return {"id": str(key.id), "name": key.name, "api_key": raw_key}
