"""User Routes — public profiles with authoring statistics."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.core.domain_types import MAX_ID
from articlehub.infrastructure.database import get_db
from articlehub.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{user_id}")
async def get_user(
    user_id: int = Path(gt=0, le=MAX_ID), db: AsyncSession = Depends(get_db),
):
    return {"user": await UserService(db).get_public_profile(user_id)}
