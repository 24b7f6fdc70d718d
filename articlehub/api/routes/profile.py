"""Profile Routes — the authenticated user's own account and avatar.

Invariants:
    - Every endpoint acts on the bearer of the token, never on a path id
    - Avatar upload expects multipart field "avatar"
"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.api.dependencies import get_current_user
from articlehub.infrastructure.database import get_db
from articlehub.models import User
from articlehub.schemas.auth import ProfileUpdate
from articlehub.services.user_service import UserService, serialize_user

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
async def get_profile(user: User = Depends(get_current_user)):
    return {"user": serialize_user(user)}


@router.put("")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update_profile(user, body)
    return {"message": "Profile updated successfully", "user": serialize_user(user)}


@router.post("/avatar")
async def upload_avatar(
    avatar: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).set_avatar(user, avatar)
    return {
        "message": "Avatar uploaded successfully",
        "avatar_url": user.avatar_url,
        "user": serialize_user(user),
    }


@router.delete("/avatar")
async def delete_avatar(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).clear_avatar(user)
    return {"message": "Avatar deleted successfully", "user": serialize_user(user)}
