"""Request Dependencies — bearer-token identity resolution for routes.

Invariants:
    - get_current_user raises AuthenticationError (401) for a missing, expired or
      invalid token, and for a token whose user no longer exists
    - get_optional_user never raises: any authentication failure means anonymous
    - The resolved User is loaded through the request's own session (get_db is cached per request)
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.core.errors import AuthenticationError
from articlehub.infrastructure.database import get_db
from articlehub.infrastructure.security import decode_access_token
from articlehub.models import User

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token not provided")
    user_id = decode_access_token(credentials.credentials)
    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    if credentials is None:
        return None
    try:
        return await get_current_user(credentials, db)
    except AuthenticationError as e:
        logger.debug(f"Optional auth ignored: {e.message}")
        return None
