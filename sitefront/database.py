"""Async engine and per-request sessions."""

import logging
import ssl
from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from sitefront.config import settings

logger = logging.getLogger(__name__)

SSL_QUERY_PARAMS = ("sslmode", "ssl")


class Base(DeclarativeBase):
    """Declarative base for all site tables."""


def _permissive_ssl_context() -> ssl.SSLContext:
    # Supabase poolers present a chain some clients cannot verify
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def get_engine_url_and_connect_args(database_url: str | None = None) -> tuple[str, dict]:
    """
    Split SSL options out of the URL.

    asyncpg rejects ``sslmode``/``ssl`` query parameters, so they are removed
    and, for Supabase hosts, replaced by an SSL context in ``connect_args``.
    """
    url = database_url or settings.database_url
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    if not any(name in query for name in SSL_QUERY_PARAMS):
        return url, {}

    for name in SSL_QUERY_PARAMS:
        query.pop(name, None)
    stripped = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
    connect_args = {}
    if "supabase" in (parsed.hostname or ""):
        connect_args["ssl"] = _permissive_ssl_context()
    return stripped, connect_args


def build_engine(database_url: str | None = None) -> AsyncEngine:
    url, connect_args = get_engine_url_and_connect_args(database_url)
    return create_async_engine(
        url,
        echo=settings.log_level.upper() == "DEBUG",
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; committed on success, rolled back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Rolling back request session")
            await session.rollback()
            raise
