"""Site (tenant) model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from sitefront.database import Base


class Site(Base):
    """One microsite bound to ``subdomain.domain``."""

    __tablename__ = "sites"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    domain_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("domains.id"), nullable=False
    )
    subdomain: Mapped[str] = mapped_column(String(63), nullable=False)
    full_domain: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # branding, seo, tracking, footer, ai and ad settings
    config: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


def default_site_config(name: str, year: int) -> dict:
    """Config document for a freshly created site."""
    return {
        "name": name,
        "tagline": "",
        "logo": "",
        "favicon": "",
        "seo": {"title": name, "description": "", "keywords": [], "ogImage": ""},
        "colors": {
            "primary": "#1e3a5f",
            "secondary": "#2d4a6f",
            "accent": "#3b82f6",
            "headerBg": "#1e3a5f",
            "headerText": "#ffffff",
            "footerBg": "#111827",
            "footerText": "#9ca3af",
            "buttonBg": "#22c55e",
            "buttonText": "#ffffff",
            "buttonHover": "#16a34a",
        },
        "typography": {
            "headingWeight": "700",
            "bodyWeight": "400",
            "headingItalic": False,
            "bodyItalic": False,
        },
        "tracking": {"gaId": "", "gtmId": "", "fbPixelId": "", "customHead": ""},
        "ai": {"openaiKey": "", "model": "gpt-4o-mini", "language": "en"},
        "footer": {"disclaimer": "", "copyright": f"© {year} {name}"},
        "adsense": {"enabled": False, "publisherId": "", "slots": {}},
    }
