"""Credential Primitives — bcrypt password hashing and JWT issue/verify.

Invariants:
    - Passwords are only ever stored as bcrypt hashes
    - Access tokens are signed with settings.jwt_secret; "sub" carries the user id as str
    - decode_access_token raises AuthenticationError (never jose exceptions) to callers

Design Decisions:
    - passlib CryptContext: hash scheme can be rotated without touching callers
    - Rounds from settings: tests run with the bcrypt minimum (4) to stay fast
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from articlehub.config import get_settings
from articlehub.core.domain_types import UserId
from articlehub.core.errors import AuthenticationError


@lru_cache
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str) -> str:
    return _password_context(get_settings().bcrypt_rounds).hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return _password_context(get_settings().bcrypt_rounds).verify(password, password_hash)


def create_access_token(user_id: UserId, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expires = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    payload = {"sub": str(user_id), "exp": expires}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UserId:
    """Verify signature and expiry; return the user id the token was issued for."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise AuthenticationError("Invalid token")
    return UserId(int(subject))
