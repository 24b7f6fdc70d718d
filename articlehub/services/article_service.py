"""Article Service — listing, reading, authoring and deleting articles.

Invariants:
    - Listing is newest-first with id as tie-breaker; search is case-insensitive on title OR content
    - Every returned article carries author info, comments_count, reactions_count, reactions
    - Only the author may update or delete (404 before 403)
    - Deleting an article removes its comments and every reaction on both

Design Decisions:
    - Reaction summaries fetched for the whole page in one store call
    - Cascade done with explicit bulk deletes: works on SQLite (no FK enforcement) and Postgres alike
"""

import logging

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.core.domain_types import SubjectType, UserId
from articlehub.core.errors import (
    EmptyUpdateError, PermissionDeniedError, ResourceNotFoundError,
)
from articlehub.core.pagination import PageRequest
from articlehub.core.reaction_summary import total_reactions
from articlehub.models import Article, ArticleReaction, Comment, CommentReaction, User
from articlehub.schemas.article import ArticleCreate, ArticleUpdate
from articlehub.services.reaction_store import SqlReactionStore

logger = logging.getLogger(__name__)


def serialize_article(
    article: Article, comments_count: int = 0, reactions: list[dict] | None = None,
) -> dict:
    reactions = reactions or []
    return {
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "author_id": article.author_id,
        "created_at": article.created_at.isoformat(),
        "updated_at": article.updated_at.isoformat(),
        "author_username": article.author.username,
        "author_avatar": article.author.avatar_url,
        "comments_count": comments_count,
        "reactions_count": total_reactions(reactions),
        "reactions": reactions,
    }


def _comments_count():
    return (
        select(func.count(Comment.id))
        .where(Comment.article_id == Article.id)
        .correlate(Article)
        .scalar_subquery()
    )


class ArticleService:
    """Article CRUD over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.reactions = SqlReactionStore(db)

    async def list_articles(
        self,
        page: PageRequest,
        search: str = "",
        author_id: int | None = None,
        requester_id: UserId | None = None,
    ) -> tuple[list[dict], int]:
        filters = []
        if search:
            filters.append(or_(
                Article.title.icontains(search, autoescape=True),
                Article.content.icontains(search, autoescape=True),
            ))
        if author_id is not None:
            filters.append(Article.author_id == author_id)

        total = await self.db.scalar(
            select(func.count(Article.id)).where(*filters),
        )
        result = await self.db.execute(
            select(Article, _comments_count())
            .where(*filters)
            .order_by(Article.created_at.desc(), Article.id.desc())
            .limit(page.limit)
            .offset(page.offset)
        )
        rows = result.all()

        summaries = await self.reactions.summarize(
            SubjectType.ARTICLE, [a.id for a, _ in rows], requester_id,
        )
        articles = [
            serialize_article(article, int(n_comments or 0), summaries.get(article.id))
            for article, n_comments in rows
        ]
        return articles, int(total or 0)

    async def get_article(
        self, article_id: int, requester_id: UserId | None = None,
    ) -> dict:
        result = await self.db.execute(
            select(Article, _comments_count()).where(Article.id == article_id),
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("Article", article_id)
        article, n_comments = row
        summaries = await self.reactions.summarize(
            SubjectType.ARTICLE, [article.id], requester_id,
        )
        return serialize_article(article, int(n_comments or 0), summaries[article.id])

    async def create_article(self, author: User, body: ArticleCreate) -> dict:
        article = Article(title=body.title, content=body.content, author_id=author.id)
        self.db.add(article)
        await self.db.commit()
        logger.info(f"Article {article.id} created", extra={"user_id": author.id})
        return await self.get_article(article.id, UserId(author.id))

    async def update_article(
        self, article_id: int, user: User, body: ArticleUpdate,
    ) -> dict:
        article = await self._get_owned(article_id, user)
        changes = body.model_dump(exclude_none=True)
        if not changes:
            raise EmptyUpdateError()
        for field, value in changes.items():
            setattr(article, field, value)
        await self.db.commit()
        return await self.get_article(article_id, UserId(user.id))

    async def delete_article(self, article_id: int, user: User) -> str:
        article = await self._get_owned(article_id, user)
        title = article.title
        comment_ids = select(Comment.id).where(Comment.article_id == article_id)
        for stmt in (
            delete(CommentReaction).where(CommentReaction.comment_id.in_(comment_ids)),
            delete(ArticleReaction).where(ArticleReaction.article_id == article_id),
            delete(Comment).where(Comment.article_id == article_id),
        ):
            await self.db.execute(stmt.execution_options(synchronize_session=False))
        await self.db.delete(article)
        await self.db.commit()
        logger.info(f"Article {article_id} deleted", extra={"user_id": user.id})
        return title

    async def _get_owned(self, article_id: int, user: User) -> Article:
        article = await self.db.get(Article, article_id)
        if article is None:
            raise ResourceNotFoundError("Article", article_id)
        if article.author_id != user.id:
            raise PermissionDeniedError("Article", article_id)
        return article
