"""Admin API schemas."""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

SUBDOMAIN_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


class CreateDomainRequest(BaseModel):
    """POST /api/admin/domains request."""

    domain: str
    name: str
    is_active: bool = True

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        return v.strip().lower().rstrip(".")


class DomainOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    domain: str
    name: str
    is_active: bool


class CreateSiteRequest(BaseModel):
    """POST /api/admin/sites request."""

    domain_id: str
    subdomain: str
    name: str
    user_id: str | None = None

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, v: str) -> str:
        v = v.strip().lower()
        if not SUBDOMAIN_RE.match(v):
            raise ValueError("subdomain must be letters, digits and hyphens")
        return v


class UpdateSiteRequest(BaseModel):
    """PATCH /api/admin/sites/{id} - config replaces the whole document."""

    name: str | None = None
    is_active: bool | None = None
    config: dict[str, Any] | None = None


class SiteOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    domain_id: str
    subdomain: str
    full_domain: str
    name: str
    is_active: bool
    config: dict[str, Any]
    user_id: str | None = None
    updated_at: datetime | None = None


class UpdateModuleRequest(BaseModel):
    """PUT /api/admin/sites/{id}/modules/{kind} - content is replaced, not merged."""

    content: dict[str, Any] | None = None
    enabled: bool | None = None
    display_order: int | None = None


class ModuleOut(BaseModel):
    model_config = {"from_attributes": True}

    kind: str
    enabled: bool
    display_order: int
    content: dict[str, Any]
    updated_at: datetime | None = None


class ProductIn(BaseModel):
    """Product payload from the admin UI or a bulk importer."""

    model_config = {"extra": "ignore"}

    slug: str
    name: str
    rank: int = 0
    badge: str | None = None
    tagline: str | None = None
    price: dict[str, Any] | None = None
    rating: float | None = Field(default=None, ge=0, le=10)
    images: dict[str, Any] | None = None
    specs: list[Any] | None = None
    best_for: list[Any] | None = None
    not_best_for: list[Any] | None = None
    brief_review: str | None = None
    full_review: str | None = None
    materials: list[Any] | None = None
    scores: list[Any] | None = None
    pros: list[Any] | None = None
    cons: list[Any] | None = None
    faqs: list[Any] | None = None
    affiliate_link: str | None = None
    cta_text: str | None = None
    show_in_ranking: bool = True
    is_active: bool = True

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        # kept as sent apart from whitespace
        v = v.strip()
        if not v or "/" in v:
            raise ValueError("slug must be non-empty and must not contain '/'")
        return v


class ProductImportRequest(BaseModel):
    """POST /api/admin/sites/{id}/products/import request."""

    products: list[ProductIn]


class ProductOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    slug: str
    name: str
    rank: int
    is_active: bool
    show_in_ranking: bool
    updated_at: datetime | None = None


class CreateApiKeyRequest(BaseModel):
    name: str = "default"


class SitemapGroupOut(BaseModel):
    index: int
    count: int
    urls: list[str]
    text: str


class SitemapGroupsOut(BaseModel):
    site_id: str
    full_domain: str
    is_active: bool
    total: int
    group_size: int
    groups: list[SitemapGroupOut]
