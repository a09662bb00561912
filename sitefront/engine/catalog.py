"""Catalog service - active products per site, ordered by rank."""

import logging
from dataclasses import dataclass, field
from urllib.parse import quote

from pydantic import ValidationError

from sitefront.errors import ProductNotFound
from sitefront.models import Product
from sitefront.schemas.content import (
    FaqItem,
    Material,
    Price,
    Spec,
    SubScore,
    as_dict,
    decode_items,
    decode_strings,
)
from sitefront.storage.repositories import SiteStore

logger = logging.getLogger(__name__)


def _rank_key(product: Product) -> int:
    rank = product.rank
    return rank if isinstance(rank, int) else 0


def sort_by_rank(products: list[Product]) -> list[Product]:
    """Ascending by rank; ``sorted`` is stable so equal ranks keep storage order."""
    return sorted(products, key=_rank_key)


def ranking_slice(products: list[Product], count: int) -> list[Product]:
    """First ``count`` active products that are shown in the ranking."""
    shown = [p for p in products if p.is_active and p.show_in_ranking is not False]
    return shown[: max(count, 0)]


class CatalogService:
    """Reads products through an injected ``SiteStore``."""

    def __init__(self, store: SiteStore):
        self.store = store

    async def list_active_products(self, site_id: str) -> list[Product]:
        products = await self.store.list_active_products(site_id)
        return sort_by_rank([p for p in products if p.is_active])

    async def get_product_by_slug(self, site_id: str, slug: str) -> Product:
        """Active product by slug; inactive rows are reported as not found."""
        product = await self.store.get_product_by_slug(site_id, slug)
        if product is None or not product.is_active:
            raise ProductNotFound(site_id, slug)
        return product


@dataclass
class ProductCard:
    """Template-friendly view of a product with its JSON fields decoded."""

    id: str
    slug: str
    name: str
    url: str
    badge: str = ""
    tagline: str = ""
    price: Price | None = None
    rating: float | None = None
    image: str = ""
    gallery: list[str] = field(default_factory=list)
    specs: list[Spec] = field(default_factory=list)
    best_for: list[str] = field(default_factory=list)
    not_best_for: list[str] = field(default_factory=list)
    brief_review: str = ""
    full_review: str = ""
    materials: list[Material] = field(default_factory=list)
    scores: list[SubScore] = field(default_factory=list)
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    faqs: list[FaqItem] = field(default_factory=list)
    affiliate_link: str = ""
    cta_text: str = "Shop Now →"


def _price(raw) -> Price | None:
    if not isinstance(raw, dict):
        return None
    try:
        return Price.model_validate(raw)
    except ValidationError:
        logger.debug("Ignoring malformed price %r", raw)
        return None


def _rating(raw) -> float | None:
    try:
        return float(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def product_card(product: Product) -> ProductCard:
    """Decode a product row defensively for rendering."""
    images = as_dict(product.images)
    main_image = images.get("main")
    return ProductCard(
        id=str(product.id),
        slug=product.slug,
        name=product.name or product.slug,
        url=f"/products/{quote(product.slug)}",
        badge=product.badge or "",
        tagline=product.tagline or "",
        price=_price(product.price),
        rating=_rating(product.rating),
        image=main_image if isinstance(main_image, str) else "",
        gallery=decode_strings(images.get("gallery")),
        specs=decode_items(product.specs, Spec),
        best_for=decode_strings(product.best_for),
        not_best_for=decode_strings(product.not_best_for),
        brief_review=product.brief_review or "",
        full_review=product.full_review or "",
        materials=decode_items(product.materials, Material),
        scores=decode_items(product.scores, SubScore),
        pros=decode_strings(product.pros),
        cons=decode_strings(product.cons),
        faqs=decode_items(product.faqs, FaqItem),
        affiliate_link=product.affiliate_link or "",
        cta_text=product.cta_text or "Shop Now →",
    )
