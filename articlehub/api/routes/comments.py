"""Comment Routes — per-article threads and author-only edits."""

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.api.dependencies import get_current_user, get_optional_user
from articlehub.core.domain_types import MAX_ID, UserId
from articlehub.core.pagination import (
    COMMENTS_DEFAULT_LIMIT, COMMENTS_MAX_LIMIT, build_pagination, resolve_page,
)
from articlehub.infrastructure.database import get_db
from articlehub.models import User
from articlehub.schemas.comment import CommentCreate, CommentUpdate
from articlehub.services.comment_service import CommentService

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/article/{article_id}")
async def list_comments(
    article_id: int = Path(gt=0, le=MAX_ID),
    page: int | None = Query(None),
    limit: int | None = Query(None),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    request = resolve_page(page, limit, COMMENTS_DEFAULT_LIMIT, COMMENTS_MAX_LIMIT)
    comments, total = await CommentService(db).list_comments(
        article_id, request, UserId(user.id) if user else None,
    )
    return {"comments": comments, "pagination": build_pagination(request, total)}


@router.post("/article/{article_id}", status_code=status.HTTP_201_CREATED)
async def create_comment(
    body: CommentCreate,
    article_id: int = Path(gt=0, le=MAX_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).create_comment(article_id, user, body)
    return {"message": "Comment created successfully", "comment": comment}


@router.put("/{comment_id}")
async def update_comment(
    body: CommentUpdate,
    comment_id: int = Path(gt=0, le=MAX_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).update_comment(comment_id, user, body)
    return {"message": "Comment updated successfully", "comment": comment}


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int = Path(gt=0, le=MAX_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    content = await CommentService(db).delete_comment(comment_id, user)
    return {"message": "Comment deleted successfully", "deletedComment": {"content": content}}
