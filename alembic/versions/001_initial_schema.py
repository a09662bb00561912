"""Initial schema - domains, sites, site_modules, products, posts, api_keys.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "domains",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("domain", sa.String(255), unique=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )

    op.create_table(
        "sites",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=True),
        sa.Column("domain_id", sa.UUID(), sa.ForeignKey("domains.id"), nullable=False),
        sa.Column("subdomain", sa.String(63), nullable=False),
        sa.Column("full_domain", sa.String(255), unique=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("config", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )

    op.create_table(
        "site_modules",
        sa.Column("site_id", sa.UUID(), sa.ForeignKey("sites.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("kind", sa.String(50), primary_key=True),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("content", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("site_id", sa.UUID(), sa.ForeignKey("sites.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False, server_default=""),
        sa.Column("badge", sa.Text(), nullable=True),
        sa.Column("tagline", sa.Text(), nullable=True),
        sa.Column("price", postgresql.JSONB(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("images", postgresql.JSONB(), nullable=True),
        sa.Column("specs", postgresql.JSONB(), nullable=True),
        sa.Column("best_for", postgresql.JSONB(), nullable=True),
        sa.Column("not_best_for", postgresql.JSONB(), nullable=True),
        sa.Column("brief_review", sa.Text(), nullable=True),
        sa.Column("full_review", sa.Text(), nullable=True),
        sa.Column("materials", postgresql.JSONB(), nullable=True),
        sa.Column("scores", postgresql.JSONB(), nullable=True),
        sa.Column("pros", postgresql.JSONB(), nullable=True),
        sa.Column("cons", postgresql.JSONB(), nullable=True),
        sa.Column("faqs", postgresql.JSONB(), nullable=True),
        sa.Column("affiliate_link", sa.Text(), nullable=True),
        sa.Column("cta_text", sa.Text(), nullable=True),
        sa.Column("show_in_ranking", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_unique_constraint("uq_products_site_slug", "products", ["site_id", "slug"])
    op.create_index("ix_products_site_rank", "products", ["site_id", "rank"])

    op.create_table(
        "posts",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("site_id", sa.UUID(), sa.ForeignKey("sites.id", ondelete="CASCADE"), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("featured_image", sa.Text(), nullable=True),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("tags", postgresql.JSONB(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("author", sa.Text(), nullable=True),
        sa.Column("seo_title", sa.Text(), nullable=True),
        sa.Column("seo_description", sa.Text(), nullable=True),
        sa.Column("seo_keywords", sa.Text(), nullable=True),
        sa.Column("published_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_unique_constraint("uq_posts_site_slug", "posts", ["site_id", "slug"])
    op.create_index("ix_posts_site_status_published", "posts", ["site_id", "status", "published_at"])

    op.create_table(
        "api_keys",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("site_id", sa.UUID(), sa.ForeignKey("sites.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False, server_default=""),
        sa.Column("key_hash", sa.String(255), unique=True, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_used_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("api_keys")
    op.drop_index("ix_posts_site_status_published", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_products_site_rank", table_name="products")
    op.drop_table("products")
    op.drop_table("site_modules")
    op.drop_table("sites")
    op.drop_table("domains")
