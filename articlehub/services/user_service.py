"""User Service — registration, login, public profiles, profile edits and avatars.

Invariants:
    - username and email stay unique; violations surface as UserAlreadyExistsError (400)
    - Login failure never reveals whether the email exists
    - Avatar file swap: new file stored before commit, old file deleted only after commit

Design Decisions:
    - Token issuing stays in the route: the service returns ORM users, not credentials
"""

import logging

from fastapi import UploadFile
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.core.errors import (
    AuthenticationError, EmptyUpdateError, ResourceNotFoundError, UserAlreadyExistsError,
)
from articlehub.infrastructure.security import hash_password, verify_password
from articlehub.infrastructure.uploads import remove_avatar, store_avatar
from articlehub.models import Article, Comment, User
from articlehub.schemas.auth import LoginRequest, ProfileUpdate, RegisterRequest

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    """Private view — only ever returned to the user themself."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "avatar_url": user.avatar_url,
        "created_at": user.created_at.isoformat(),
        "updated_at": user.updated_at.isoformat(),
    }


class UserService:
    """Account lifecycle over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, body: RegisterRequest) -> User:
        if await self._taken(body.username, body.email):
            raise UserAlreadyExistsError()

        user = User(
            username=body.username,
            email=body.email,
            password_hash=hash_password(body.password),
        )
        self.db.add(user)
        await self._commit_unique()
        logger.info(f"User registered: {user.username}", extra={"user_id": user.id})
        return user

    async def authenticate(self, body: LoginRequest) -> User:
        result = await self.db.execute(select(User).where(User.email == body.email))
        user = result.scalar_one_or_none()
        if not user or not verify_password(body.password, user.password_hash):
            raise AuthenticationError(
                "Invalid email or password", code="INVALID_CREDENTIALS",
            )
        return user

    async def get_public_profile(self, user_id: int) -> dict:
        articles_count = (
            select(func.count(Article.id))
            .where(Article.author_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        comments_count = (
            select(func.count(Comment.id))
            .where(Comment.author_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(User, articles_count, comments_count).where(User.id == user_id),
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("User", user_id)
        user, n_articles, n_comments = row
        return {
            "id": user.id,
            "username": user.username,
            "avatar_url": user.avatar_url,
            "created_at": user.created_at.isoformat(),
            "statistics": {
                "articles_count": int(n_articles or 0),
                "comments_count": int(n_comments or 0),
            },
        }

    async def update_profile(self, user: User, body: ProfileUpdate) -> User:
        changes = body.model_dump(exclude_none=True)
        if not changes:
            raise EmptyUpdateError()
        if await self._taken(changes.get("username"), changes.get("email"), exclude_id=user.id):
            raise UserAlreadyExistsError()

        for field, value in changes.items():
            setattr(user, field, value)
        await self._commit_unique()
        await self.db.refresh(user)
        return user

    async def set_avatar(self, user: User, upload: UploadFile | None) -> User:
        new_url = await store_avatar(user.id, upload)
        old_url = user.avatar_url
        user.avatar_url = new_url
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            remove_avatar(new_url)
            raise
        if old_url and old_url != new_url:
            remove_avatar(old_url)
        await self.db.refresh(user)
        return user

    async def clear_avatar(self, user: User) -> User:
        if not user.avatar_url:
            raise ResourceNotFoundError("Avatar", user.id)
        old_url = user.avatar_url
        user.avatar_url = None
        await self.db.commit()
        remove_avatar(old_url)
        await self.db.refresh(user)
        return user

    async def _taken(
        self, username: str | None, email: str | None, exclude_id: int | None = None,
    ) -> bool:
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return False
        query = select(User.id).where(or_(*conditions))
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def _commit_unique(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise UserAlreadyExistsError()
