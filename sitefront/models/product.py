"""Product (catalog item) model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from sitefront.database import Base


class Product(Base):
    """Reviewed product shown in the ranking and on its own detail page."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    site_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sites.id"), nullable=False
    )
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    badge: Mapped[str | None] = mapped_column(Text, nullable=True)
    tagline: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[dict | None] = mapped_column(JSONB, nullable=True)  # original, current, currency
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    images: Mapped[dict | None] = mapped_column(JSONB, nullable=True)  # main, gallery
    specs: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    best_for: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    not_best_for: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    brief_review: Mapped[str | None] = mapped_column(Text, nullable=True)
    full_review: Mapped[str | None] = mapped_column(Text, nullable=True)
    materials: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    scores: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    pros: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    cons: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    faqs: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    affiliate_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    cta_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    show_in_ranking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("site_id", "slug", name="uq_products_site_slug"),)
