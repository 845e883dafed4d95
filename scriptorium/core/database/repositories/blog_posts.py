"""
Blog post repository interface and implementation.

This module provides data access for blog posts: search with visibility
rules, sorting by rating or comment count, template links and cascading
deletion.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, exists, false, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from scriptorium.core.models.domain.enums import BlogPostSort

from ..entities.blog_posts import BlogPost, BlogPostCodeTemplateLink
from ..entities.code_templates import CodeTemplate
from ..entities.comments import Comment
from ..entities.ratings import Rating
from ..entities.reports import Report
from .base import AsyncBaseRepository, QueryBuilder
from .comments import CommentRepository
from .ratings import blog_post_score_subquery
from .reports import blog_post_report_count_subquery

# (post, score, comment_count)
BlogPostRow = Tuple[BlogPost, int, int]
# (post, score, comment_count, report_count)
ModerationRow = Tuple[BlogPost, int, int, int]

# Stripped from tag search terms; they would match the JSON array syntax
_JSON_SYNTAX = str.maketrans("", "", "\"[],\\")


def comment_count_subquery():
    """Correlated count of visible comments for ``BlogPost`` rows."""
    return (
        select(func.count(Comment.id))
        .where(Comment.blog_post_id == BlogPost.id, Comment.is_hidden == false())
        .correlate(BlogPost)
        .scalar_subquery()
    )


def visibility_clause(viewer_id: Optional[int], include_hidden: bool):
    """Restrict posts to those the viewer may see.

    Administrators (``include_hidden``) see everything; authors also see
    their own hidden posts; everyone else sees only visible posts.
    """
    if include_hidden:
        return None
    visible = BlogPost.is_hidden == false()
    if viewer_id is not None:
        visible = or_(visible, BlogPost.author_id == viewer_id)
    return visible


class BlogPostRepository(AsyncBaseRepository[BlogPost]):
    """Repository for blog post data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async session for database operations
        """
        super().__init__(session, BlogPost)

    async def create_with_templates(self, post: BlogPost, code_template_ids: Sequence[int]) -> BlogPost:
        """
        Create a blog post and link it to code templates in one transaction.

        Args:
            post: BlogPost instance to persist
            code_template_ids: Templates to link; must exist

        Returns:
            Persisted BlogPost
        """
        self.session.add(post)
        await self.session.flush()
        for template_id in dict.fromkeys(code_template_ids):
            self.session.add(BlogPostCodeTemplateLink(blog_post_id=post.id, code_template_id=template_id))
        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def replace_templates(self, post: BlogPost, code_template_ids: Sequence[int]) -> BlogPost:
        """Replace the template links of a post and save pending post changes."""
        await self.session.execute(
            delete(BlogPostCodeTemplateLink).where(BlogPostCodeTemplateLink.blog_post_id == post.id)
        )
        for template_id in dict.fromkeys(code_template_ids):
            self.session.add(BlogPostCodeTemplateLink(blog_post_id=post.id, code_template_id=template_id))
        return await self.update(post)

    async def get_with_stats(self, post_id: int) -> Optional[BlogPostRow]:
        """Get a post together with its score and visible comment count."""
        stmt = select(
            BlogPost,
            blog_post_score_subquery().label("score"),
            comment_count_subquery().label("comment_count"),
        ).where(BlogPost.id == post_id)
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return None
        post, score, comment_count = row
        return post, int(score), int(comment_count)

    async def search(
        self,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[str] = None,
        code_template: Optional[str] = None,
        sort: BlogPostSort = BlogPostSort.newest,
        viewer_id: Optional[int] = None,
        include_hidden: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[BlogPostRow], int]:
        """
        Search blog posts.

        A post matches when ANY of the given text filters matches it
        (case-insensitive substring). Without filters every visible post
        matches.

        Args:
            title: Substring of the title
            content: Substring of the body
            tags: Substring of any tag; quotes, brackets, commas and backslashes are ignored
            code_template: Substring of the title of a linked template
            sort: newest, rating (score, ties newest first) or comments
            viewer_id: Authenticated viewer, for own hidden posts
            include_hidden: Include every hidden post (administrators)
            limit: Page size
            offset: Rows to skip

        Returns:
            Tuple of (page of (post, score, comment_count), total matches)
        """
        conditions = []
        visible = visibility_clause(viewer_id, include_hidden)
        if visible is not None:
            conditions.append(visible)

        matches = []
        if title:
            matches.append(QueryBuilder.contains(BlogPost.title, title))
        if content:
            matches.append(QueryBuilder.contains(BlogPost.content, content))
        if tags:
            # A term made only of JSON syntax matches no tag
            tag = tags.translate(_JSON_SYNTAX).strip()
            matches.append(QueryBuilder.contains(BlogPost.tags, tag) if tag else false())
        if code_template:
            matches.append(
                exists()
                .where(
                    BlogPostCodeTemplateLink.blog_post_id == BlogPost.id,
                    BlogPostCodeTemplateLink.code_template_id == CodeTemplate.id,
                    QueryBuilder.contains(CodeTemplate.title, code_template),
                )
                .correlate(BlogPost)
            )
        if matches:
            conditions.append(or_(*matches))

        score = blog_post_score_subquery().label("score")
        comment_count = comment_count_subquery().label("comment_count")
        stmt = select(BlogPost, score, comment_count).where(*conditions)

        newest = (BlogPost.created_at.desc(), BlogPost.id.desc())
        if sort == BlogPostSort.rating:
            stmt = stmt.order_by(score.desc(), *newest)
        elif sort == BlogPostSort.comments:
            stmt = stmt.order_by(comment_count.desc(), *newest)
        else:
            stmt = stmt.order_by(*newest)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.execute(stmt)
        rows = [(post, int(s), int(c)) for post, s, c in result.all()]

        count_stmt = select(func.count(BlogPost.id)).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return rows, int(total)

    async def list_for_template(
        self, template_id: int, *, viewer_id: Optional[int] = None, include_hidden: bool = False
    ) -> List[BlogPostRow]:
        """Get the posts that link a template, newest first."""
        stmt = (
            select(
                BlogPost,
                blog_post_score_subquery().label("score"),
                comment_count_subquery().label("comment_count"),
            )
            .join(BlogPostCodeTemplateLink, BlogPostCodeTemplateLink.blog_post_id == BlogPost.id)
            .where(BlogPostCodeTemplateLink.code_template_id == template_id)
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        )
        visible = visibility_clause(viewer_id, include_hidden)
        if visible is not None:
            stmt = stmt.where(visible)
        result = await self.session.execute(stmt)
        return [(post, int(s), int(c)) for post, s, c in result.all()]

    async def list_for_author(
        self, author_id: int, *, viewer_id: Optional[int] = None, include_hidden: bool = False
    ) -> List[BlogPostRow]:
        """Get a user's posts, newest first, honoring visibility."""
        stmt = (
            select(
                BlogPost,
                blog_post_score_subquery().label("score"),
                comment_count_subquery().label("comment_count"),
            )
            .where(BlogPost.author_id == author_id)
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        )
        visible = visibility_clause(viewer_id, include_hidden)
        if visible is not None:
            stmt = stmt.where(visible)
        result = await self.session.execute(stmt)
        return [(post, int(s), int(c)) for post, s, c in result.all()]

    def _moderation_select(self):
        return select(
            BlogPost,
            blog_post_score_subquery().label("score"),
            comment_count_subquery().label("comment_count"),
            blog_post_report_count_subquery().label("report_count"),
        )

    async def list_with_report_counts(
        self, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[ModerationRow]:
        """List all posts (hidden included) by report count, most reported first."""
        stmt = self._moderation_select()
        stmt = stmt.order_by(
            stmt.selected_columns.report_count.desc(), BlogPost.created_at.desc(), BlogPost.id.desc()
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return [(post, int(s), int(c), int(r)) for post, s, c, r in result.all()]

    async def get_with_report_count(self, post_id: int) -> Optional[ModerationRow]:
        """Get a post with its score, visible comment count and report count."""
        row = (await self.session.execute(self._moderation_select().where(BlogPost.id == post_id))).first()
        if row is None:
            return None
        post, score, comment_count, report_count = row
        return post, int(score), int(comment_count), int(report_count)

    async def set_hidden(self, post: BlogPost, hidden: bool) -> BlogPost:
        """Hide or unhide a blog post."""
        post.is_hidden = hidden
        return await self.update(post)

    async def delete(self, post_id: int) -> bool:
        """
        Delete a blog post with its comments, votes, reports and template links.

        Args:
            post_id: Blog post ID to delete

        Returns:
            True if deleted, False if not found
        """
        post = await self.get_by_id(post_id)
        if post is None:
            return False
        await self.purge([post_id])
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[BlogPost]:
        """List posts newest first, filtered by ``author_id`` or ``is_hidden``."""
        stmt = select(BlogPost).order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        stmt = QueryBuilder.apply_filters(stmt, BlogPost, filters or {})
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def purge(self, post_ids: Iterable[int]) -> None:
        """Delete posts and everything attached to them without committing."""
        ids = list(post_ids)
        if not ids:
            return
        await CommentRepository(self.session).purge_for_posts(ids)
        await self.session.execute(delete(Rating).where(Rating.blog_post_id.in_(ids)))
        await self.session.execute(delete(Report).where(Report.blog_post_id.in_(ids)))
        await self.session.execute(
            delete(BlogPostCodeTemplateLink).where(BlogPostCodeTemplateLink.blog_post_id.in_(ids))
        )
        await self.session.execute(delete(BlogPost).where(BlogPost.id.in_(ids)))

    async def purge_for_author(self, author_id: int) -> None:
        """Delete every post written by a user without committing."""
        result = await self.session.execute(select(BlogPost.id).where(BlogPost.author_id == author_id))
        await self.purge(result.scalars().all())
