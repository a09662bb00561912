"""Engine exceptions.

Read paths raise these instead of HTTP errors; ``sitefront.main`` translates
them at the application boundary.
"""


class NotFoundError(Exception):
    """Base class for scoped not-found results."""


class SiteNotFound(NotFoundError):
    """No active site is bound to the requested host."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"No active site for host {host!r}")


class ProductNotFound(NotFoundError):
    """Unknown or inactive product slug."""

    def __init__(self, site_id: str, slug: str):
        self.site_id = site_id
        self.slug = slug
        super().__init__(f"Product {slug!r} not found for site {site_id}")


class PostNotFound(NotFoundError):
    """Unknown or unpublished post slug."""

    def __init__(self, site_id: str, slug: str):
        self.site_id = site_id
        self.slug = slug
        super().__init__(f"Post {slug!r} not found for site {site_id}")


class StoreError(Exception):
    """A backing-store read or write failed."""


class ConflictError(Exception):
    """Write rejected because a unique key is already taken."""
