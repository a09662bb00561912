"""Publishing API - external writers push blog posts with a per-site key."""

import logging
from urllib.parse import quote
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Query, status

from sitefront.auth.middleware import API_KEY_HEADER, DbDep, bearer_token, resolve_api_key
from sitefront.config import settings
from sitefront.models import Post
from sitefront.models.post import POST_PUBLISHED
from sitefront.schemas.publish import (
    PostListResponse,
    PostSummary,
    PublishPostRequest,
    PublishPostResponse,
)
from sitefront.storage.repositories import get_post_by_slug, get_site, list_site_posts, utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/publish", response_model=PublishPostResponse)
async def publish_post(
    body: PublishPostRequest,
    db: DbDep,
    auth_header: str | None = Depends(API_KEY_HEADER),
):
    """Create or update a post keyed on (site, slug)."""
    api_key = await resolve_api_key(db, bearer_token(auth_header) or body.api_key)
    if not body.title or not body.slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="title and slug are required",
        )
    site = await get_site(db, api_key.site_id)
    if not site:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Site not found")

    now = utcnow()
    post = await get_post_by_slug(db, site.id, body.slug)
    if post:
        action = "updated"
        was_published = post.status == POST_PUBLISHED
        # fields left out of the request keep their stored values
        fields = body.model_dump(exclude={"api_key"}, exclude_unset=True)
    else:
        action = "created"
        was_published = False
        post = Post(id=str(uuid4()), site_id=site.id, created_at=now)
        db.add(post)
        fields = body.model_dump(exclude={"api_key"})
    for name, value in fields.items():
        setattr(post, name, value)
    post.updated_at = now
    if post.status == POST_PUBLISHED and not (was_published and post.published_at):
        post.published_at = now

    api_key.last_used_at = now
    await db.flush()
    logger.info("Post %s %s for site %s", body.slug, action, site.id)

    return PublishPostResponse(
        post_id=str(post.id),
        url=f"{settings.site_scheme}://{site.full_domain}/blog/{quote(post.slug)}",
        action=action,
    )


@router.get("/publish", response_model=PostListResponse)
async def list_posts(
    db: DbDep,
    auth_header: str | None = Depends(API_KEY_HEADER),
    api_key: str | None = Query(default=None),
):
    """Posts of the key's site, newest first."""
    key = await resolve_api_key(db, bearer_token(auth_header) or api_key)
    posts = await list_site_posts(db, key.site_id)
    key.last_used_at = utcnow()
    await db.flush()
    return PostListResponse(posts=[PostSummary.model_validate(p) for p in posts])
