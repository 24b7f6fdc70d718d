"""Article Routes — paginated listing with search, and author-only writes.

Invariants:
    - page/limit are normalised by core.pagination (never rejected)
    - Reads are optional-auth: a valid token only adds user_reacted flags
"""

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.api.dependencies import get_current_user, get_optional_user
from articlehub.core.domain_types import MAX_ID, UserId
from articlehub.core.pagination import (
    ARTICLES_DEFAULT_LIMIT, ARTICLES_MAX_LIMIT, build_pagination, resolve_page,
)
from articlehub.infrastructure.database import get_db
from articlehub.models import User
from articlehub.schemas.article import ArticleCreate, ArticleUpdate
from articlehub.services.article_service import ArticleService

router = APIRouter(prefix="/api/articles", tags=["articles"])


def _requester(user: User | None) -> UserId | None:
    return UserId(user.id) if user else None


@router.get("")
async def list_articles(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    search: str = Query(""),
    author_id: int | None = Query(None, gt=0, le=MAX_ID),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    request = resolve_page(page, limit, ARTICLES_DEFAULT_LIMIT, ARTICLES_MAX_LIMIT)
    search = search.strip()
    articles, total = await ArticleService(db).list_articles(
        request, search, author_id, _requester(user),
    )
    return {
        "articles": articles,
        "pagination": build_pagination(request, total),
        "filters": {"search": search, "author_id": author_id},
    }


@router.get("/{article_id}")
async def get_article(
    article_id: int = Path(gt=0, le=MAX_ID),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return {"article": await ArticleService(db).get_article(article_id, _requester(user))}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_article(
    body: ArticleCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    article = await ArticleService(db).create_article(user, body)
    return {"message": "Article created successfully", "article": article}


@router.put("/{article_id}")
async def update_article(
    body: ArticleUpdate,
    article_id: int = Path(gt=0, le=MAX_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    article = await ArticleService(db).update_article(article_id, user, body)
    return {"message": "Article updated successfully", "article": article}


@router.delete("/{article_id}")
async def delete_article(
    article_id: int = Path(gt=0, le=MAX_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    title = await ArticleService(db).delete_article(article_id, user)
    return {"message": "Article deleted successfully", "deletedArticle": {"title": title}}
