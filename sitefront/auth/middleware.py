"""API key and admin token authentication."""

import hashlib
import hmac
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from sitefront.config import settings
from sitefront.database import get_db
from sitefront.models import ApiKey
from sitefront.storage.repositories import get_api_key_by_hash

API_KEY_HEADER = APIKeyHeader(name="Authorization", auto_error=False)

API_KEY_PREFIX = "sk_site_"


def hash_api_key(api_key: str) -> str:
    """Hash API key with salt for storage/lookup."""
    return hashlib.sha256(
        f"{settings.api_key_hash_salt}:{api_key}".encode()
    ).hexdigest()


def generate_api_key() -> str:
    """New opaque publishing key; only its hash is persisted."""
    return API_KEY_PREFIX + secrets.token_urlsafe(24)


def bearer_token(auth_header: str | None) -> str | None:
    """Token from an ``Authorization: Bearer ...`` header, if any."""
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header[7:].strip()
    return token or None


async def resolve_api_key(db: AsyncSession, raw_key: str | None) -> ApiKey:
    """Look up an active publishing key or fail with 400/401."""
    if not raw_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing api_key",
        )
    api_key = await get_api_key_by_hash(db, hash_api_key(raw_key))
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or inactive API key",
        )
    return api_key


async def require_admin(auth_header: str | None = Depends(API_KEY_HEADER)) -> None:
    """Admin API guard - bearer token must equal the configured admin token."""
    token = bearer_token(auth_header)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
        )
    if not hmac.compare_digest(token, settings.admin_api_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token",
        )


# Type alias for dependency injection
AdminDep = Annotated[None, Depends(require_admin)]
DbDep = Annotated[AsyncSession, Depends(get_db)]
