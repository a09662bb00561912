"""Database models."""

from sitefront.models.domain import Domain
from sitefront.models.site import Site
from sitefront.models.module import SiteModule
from sitefront.models.product import Product
from sitefront.models.post import Post
from sitefront.models.api_key import ApiKey

__all__ = ["Domain", "Site", "SiteModule", "Product", "Post", "ApiKey"]
