"""Root domain model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from sitefront.database import Base


class Domain(Base):
    """Shared root domain that sites are created under (e.g. example.com)."""

    __tablename__ = "domains"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    domain: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
