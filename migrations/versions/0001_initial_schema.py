"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUS = sa.String(length=16)


def upgrade() -> None:
    """Create posts, comments, reactions, passcodes and subscribers."""
    op.create_table(
        "blog_post",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("excerpt", sa.String(length=500), nullable=True),
        sa.Column("content_html", sa.Text(), nullable=False),
        sa.Column("content_json", sa.Text(), nullable=True),
        sa.Column("featured_image_url", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("author_name", sa.String(length=100), nullable=True),
        sa.Column("author_email", sa.String(length=254), nullable=False),
        sa.Column("author_mobile", sa.String(length=32), nullable=True),
        sa.Column("status", STATUS, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by_admin_id", sa.String(length=100), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("month", sa.Integer(), nullable=True),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dislikes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comments_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("email_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
        sa.CheckConstraint(
            "(status = 'PUBLISHED' AND year IS NOT NULL AND month IS NOT NULL)"
            " OR (status != 'PUBLISHED' AND year IS NULL AND month IS NULL)",
            name="ck_blog_post_archive_fields",
        ),
        sa.CheckConstraint(
            "views_count >= 0 AND likes_count >= 0 AND dislikes_count >= 0"
            " AND comments_count >= 0",
            name="ck_blog_post_counters_non_negative",
        ),
    )
    op.create_index("ix_blog_post_author_email", "blog_post", ["author_email"])
    op.create_index("ix_blog_post_status", "blog_post", ["status"])
    op.create_index("ix_blog_post_published_at", "blog_post", ["published_at"])
    op.create_index("ix_blog_post_status_year_month", "blog_post", ["status", "year", "month"])

    op.create_table(
        "blog_comment",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("post_id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=True),
        sa.Column("comment_text", sa.Text(), nullable=False),
        sa.Column("status", STATUS, nullable=False),
        sa.Column("ip_hash", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["blog_post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_blog_comment_post_status", "blog_comment", ["post_id", "status"])
    op.create_index("ix_blog_comment_ip_created", "blog_comment", ["ip_hash", "created_at"])

    op.create_table(
        "blog_reaction",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.String(length=32), nullable=False),
        sa.Column("visitor_key", sa.String(length=128), nullable=False),
        sa.Column("reaction_type", STATUS, nullable=False),
        sa.Column("ip_hash", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["blog_post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "visitor_key", name="uq_blog_reaction_post_visitor"),
    )
    op.create_index("ix_blog_reaction_post_id", "blog_reaction", ["post_id"])

    op.create_table(
        "reaction_write",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("visitor_key", sa.String(length=128), nullable=False),
        sa.Column("post_id", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["blog_post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_reaction_write_visitor_created", "reaction_write", ["visitor_key", "created_at"]
    )
    op.create_index("ix_reaction_write_created", "reaction_write", ["created_at"])

    op.create_table(
        "otp_verification",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("purpose", STATUS, nullable=False),
        sa.Column("otp_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("attempts_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("attempts_count >= 0", name="ck_otp_attempts_non_negative"),
    )
    op.create_index(
        "ix_otp_email_purpose_created", "otp_verification", ["email", "purpose", "created_at"]
    )

    op.create_table(
        "subscriber",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("status", STATUS, nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("unsubscribed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )


def downgrade() -> None:
    """Drop every BlogPress table."""
    op.drop_table("subscriber")
    op.drop_index("ix_otp_email_purpose_created", table_name="otp_verification")
    op.drop_table("otp_verification")
    op.drop_index("ix_reaction_write_created", table_name="reaction_write")
    op.drop_index("ix_reaction_write_visitor_created", table_name="reaction_write")
    op.drop_table("reaction_write")
    op.drop_index("ix_blog_reaction_post_id", table_name="blog_reaction")
    op.drop_table("blog_reaction")
    op.drop_index("ix_blog_comment_ip_created", table_name="blog_comment")
    op.drop_index("ix_blog_comment_post_status", table_name="blog_comment")
    op.drop_table("blog_comment")
    op.drop_index("ix_blog_post_status_year_month", table_name="blog_post")
    op.drop_index("ix_blog_post_published_at", table_name="blog_post")
    op.drop_index("ix_blog_post_status", table_name="blog_post")
    op.drop_index("ix_blog_post_author_email", table_name="blog_post")
    op.drop_table("blog_post")
