"""Initial schema for Scriptorium

Revision ID: 20261019_000000
Revises: None
Create Date: 2026-10-19 00:00:00.000000

Creates the user, code template, blog post, comment, rating and report
tables. The seed administrator is created by the application on startup.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("firstname", sa.String(100), nullable=False),
        sa.Column("lastname", sa.String(100), nullable=False),
        sa.Column("avatar", sa.String(), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("role", sa.String(16), nullable=False, server_default="USER"),
        sa.Column("is_banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
    )

    op.create_table(
        "code_templates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(32), nullable=False),
        sa.Column("tags", sa.String(), nullable=False, server_default="[]"),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("forked_from_id", sa.Integer(), sa.ForeignKey("code_templates.id"), nullable=True),
        sa.Column("is_forked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_code_templates_author_id", "author_id"),
        sa.Index("ix_code_templates_forked_from_id", "forked_from_id"),
    )

    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tags", sa.String(), nullable=False, server_default="[]"),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_blog_posts_author_id", "author_id"),
        sa.Index("ix_blog_posts_is_hidden", "is_hidden"),
        sa.Index("ix_blog_posts_created_at", "created_at"),
    )

    op.create_table(
        "blog_post_code_templates",
        sa.Column("blog_post_id", sa.Integer(), sa.ForeignKey("blog_posts.id"), nullable=False),
        sa.Column("code_template_id", sa.Integer(), sa.ForeignKey("code_templates.id"), nullable=False),
        sa.PrimaryKeyConstraint("blog_post_id", "code_template_id"),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("blog_post_id", sa.Integer(), sa.ForeignKey("blog_posts.id"), nullable=False),
        sa.Column("parent_comment_id", sa.Integer(), sa.ForeignKey("comments.id"), nullable=True),
        sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_comments_author_id", "author_id"),
        sa.Index("ix_comments_blog_post_id", "blog_post_id"),
        sa.Index("ix_comments_parent_comment_id", "parent_comment_id"),
    )

    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("blog_post_id", sa.Integer(), sa.ForeignKey("blog_posts.id"), nullable=True),
        sa.Column("comment_id", sa.Integer(), sa.ForeignKey("comments.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "blog_post_id", name="uq_ratings_user_blog_post"),
        sa.UniqueConstraint("user_id", "comment_id", name="uq_ratings_user_comment"),
        sa.CheckConstraint("value IN (-1, 1)", name="ck_ratings_value"),
        sa.CheckConstraint("(blog_post_id IS NULL) <> (comment_id IS NULL)", name="ck_ratings_single_target"),
        sa.Index("ix_ratings_user_id", "user_id"),
        sa.Index("ix_ratings_blog_post_id", "blog_post_id"),
        sa.Index("ix_ratings_comment_id", "comment_id"),
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(500), nullable=False),
        sa.Column("additional_info", sa.Text(), nullable=True),
        sa.Column("reporter_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("blog_post_id", sa.Integer(), sa.ForeignKey("blog_posts.id"), nullable=True),
        sa.Column("comment_id", sa.Integer(), sa.ForeignKey("comments.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("(blog_post_id IS NULL) <> (comment_id IS NULL)", name="ck_reports_single_target"),
        sa.Index("ix_reports_reporter_id", "reporter_id"),
        sa.Index("ix_reports_blog_post_id", "blog_post_id"),
        sa.Index("ix_reports_comment_id", "comment_id"),
        sa.Index("ix_reports_created_at", "created_at"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("reports")
    op.drop_table("ratings")
    op.drop_table("comments")
    op.drop_table("blog_post_code_templates")
    op.drop_table("blog_posts")
    op.drop_table("code_templates")
    op.drop_table("users")
