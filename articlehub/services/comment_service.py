"""Comment Service — per-article comment threads.

Invariants:
    - Listing is oldest-first with id as tie-breaker; 404 when the article does not exist
    - Only the author may update or delete a comment (404 before 403)
    - Deleting a comment removes its reactions
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.core.domain_types import SubjectType, UserId
from articlehub.core.errors import PermissionDeniedError, ResourceNotFoundError
from articlehub.core.pagination import PageRequest
from articlehub.core.reaction_summary import total_reactions
from articlehub.models import Article, Comment, CommentReaction, User
from articlehub.schemas.comment import CommentCreate, CommentUpdate
from articlehub.services.reaction_store import SqlReactionStore

logger = logging.getLogger(__name__)


def serialize_comment(comment: Comment, reactions: list[dict] | None = None) -> dict:
    reactions = reactions or []
    return {
        "id": comment.id,
        "content": comment.content,
        "article_id": comment.article_id,
        "author_id": comment.author_id,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
        "author_username": comment.author.username,
        "author_avatar": comment.author.avatar_url,
        "reactions_count": total_reactions(reactions),
        "reactions": reactions,
    }


class CommentService:
    """Comment CRUD over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.reactions = SqlReactionStore(db)

    async def list_comments(
        self, article_id: int, page: PageRequest, requester_id: UserId | None = None,
    ) -> tuple[list[dict], int]:
        await self._require_article(article_id)
        total = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.article_id == article_id),
        )
        result = await self.db.execute(
            select(Comment)
            .where(Comment.article_id == article_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .limit(page.limit)
            .offset(page.offset)
        )
        comments = result.scalars().all()
        summaries = await self.reactions.summarize(
            SubjectType.COMMENT, [c.id for c in comments], requester_id,
        )
        return (
            [serialize_comment(c, summaries.get(c.id)) for c in comments],
            int(total or 0),
        )

    async def get_comment(
        self, comment_id: int, requester_id: UserId | None = None,
    ) -> dict:
        comment = await self._get(comment_id)
        summaries = await self.reactions.summarize(
            SubjectType.COMMENT, [comment.id], requester_id,
        )
        return serialize_comment(comment, summaries[comment.id])

    async def create_comment(
        self, article_id: int, author: User, body: CommentCreate,
    ) -> dict:
        await self._require_article(article_id)
        comment = Comment(content=body.content, article_id=article_id, author_id=author.id)
        self.db.add(comment)
        await self.db.commit()
        logger.info(
            f"Comment {comment.id} added to article {article_id}",
            extra={"user_id": author.id},
        )
        return await self.get_comment(comment.id, UserId(author.id))

    async def update_comment(
        self, comment_id: int, user: User, body: CommentUpdate,
    ) -> dict:
        comment = await self._get_owned(comment_id, user)
        comment.content = body.content
        await self.db.commit()
        return await self.get_comment(comment_id, UserId(user.id))

    async def delete_comment(self, comment_id: int, user: User) -> str:
        comment = await self._get_owned(comment_id, user)
        content = comment.content
        await self.db.execute(
            delete(CommentReaction)
            .where(CommentReaction.comment_id == comment_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.delete(comment)
        await self.db.commit()
        logger.info(f"Comment {comment_id} deleted", extra={"user_id": user.id})
        return content

    async def _require_article(self, article_id: int) -> None:
        found = await self.db.scalar(select(Article.id).where(Article.id == article_id))
        if found is None:
            raise ResourceNotFoundError("Article", article_id)

    async def _get(self, comment_id: int) -> Comment:
        result = await self.db.execute(select(Comment).where(Comment.id == comment_id))
        comment = result.scalar_one_or_none()
        if comment is None:
            raise ResourceNotFoundError("Comment", comment_id)
        return comment

    async def _get_owned(self, comment_id: int, user: User) -> Comment:
        comment = await self._get(comment_id)
        if comment.author_id != user.id:
            raise PermissionDeniedError("Comment", comment_id)
        return comment
