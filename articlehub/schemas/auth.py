"""Auth Schemas — registration, login and profile update payloads.

Invariants:
    - username: 3-30 chars, ASCII letters and digits only
    - email: syntactically valid address
    - password: >= 6 chars on register, non-empty on login
    - ProfileUpdate: both fields optional; emptiness is a service-level EMPTY_UPDATE
"""

from pydantic import BaseModel, EmailStr, Field

USERNAME_PATTERN = r"^[A-Za-z0-9]+$"


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdate(BaseModel):
    username: str | None = Field(
        None, min_length=3, max_length=30, pattern=USERNAME_PATTERN,
    )
    email: EmailStr | None = None
