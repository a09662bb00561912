"""Per-site content module instances."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from sitefront.database import Base


class SiteModule(Base):
    """One module kind for one site - at most one row per (site_id, kind)."""

    __tablename__ = "site_modules"

    site_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sites.id"), primary_key=True
    )
    kind: Mapped[str] = mapped_column(String(50), primary_key=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # shape depends on kind; never validated on write
    content: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
