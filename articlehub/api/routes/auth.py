"""Auth Routes — registration, login and token introspection.

Invariants:
    - register and login both return a fresh access token next to the user
    - Login failures share one message whether the email or the password was wrong
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.api.dependencies import get_current_user
from articlehub.core.domain_types import UserId
from articlehub.infrastructure.database import get_db
from articlehub.infrastructure.security import create_access_token
from articlehub.models import User
from articlehub.schemas.auth import LoginRequest, RegisterRequest
from articlehub.services.user_service import UserService, serialize_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await UserService(db).register(body)
    return {
        "message": "User registered successfully",
        "user": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "created_at": user.created_at.isoformat(),
        },
        "token": create_access_token(UserId(user.id)),
    }


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await UserService(db).authenticate(body)
    logger.info("User logged in", extra={"user_id": user.id})
    return {
        "message": "Login successful",
        "user": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "avatar_url": user.avatar_url,
        },
        "token": create_access_token(UserId(user.id)),
    }


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"user": serialize_user(user)}


@router.post("/verify-token")
async def verify_token(user: User = Depends(get_current_user)):
    return {"message": "Token is valid", "user": serialize_user(user)}
