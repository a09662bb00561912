"""Publishing API schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class PublishPostRequest(BaseModel):
    """POST /api/posts/publish request.

    ``api_key`` in the body is accepted for clients that cannot set headers.
    """

    api_key: str | None = None
    title: str | None = None
    slug: str | None = None
    content: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    seo_title: str | None = None
    seo_description: str | None = None
    seo_keywords: str | None = None
    status: Literal["draft", "published"] = "published"
    author: str | None = None


class PublishPostResponse(BaseModel):
    success: bool = True
    post_id: str
    url: str
    action: Literal["created", "updated"]


class PostSummary(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    title: str
    slug: str
    status: str
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostListResponse(BaseModel):
    success: bool = True
    posts: list[PostSummary]
