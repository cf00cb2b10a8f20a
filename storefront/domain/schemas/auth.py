"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from storefront.domain.models.user import ROLE_ADMIN
from storefront.domain.schemas.common import Pagination, ReadModel, RequestModel


def _normalize_email(value: str) -> str:
    return value.strip().lower() if isinstance(value, str) else value


def _strip(value):
    return value.strip() if isinstance(value, str) else value


# ---------------------------------------------------------------------------
# Projections. PublicUser never carries the hash; StoredUser is only handed
# out by the credential store to callers that verify passwords.
# ---------------------------------------------------------------------------

class PublicUser(ReadModel):
    id: str
    name: str
    email: str
    role: str
    is_active: bool
    avatar: Optional[str] = None
    bio: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = Field(None, serialization_alias="joinedAt")
    last_login: Optional[datetime] = None


class StoredUser(PublicUser):
    password_hash: str = Field(exclude=True, repr=False)


class Identity(ReadModel):
    """Resolved caller attached to an authenticated request."""
    id: str
    name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class RegisterRequest(RequestModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return _strip(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class LoginRequest(RequestModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class ProfileUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    avatar: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("name", "avatar", "bio", "phone", mode="before")
    @classmethod
    def strip_fields(cls, value):
        return _strip(value)


class PasswordChange(RequestModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=255)
    confirm_password: str = Field(min_length=1)

    @model_validator(mode="after")
    def check_new_password(self) -> "PasswordChange":
        if self.new_password != self.confirm_password:
            raise ValueError("Las contraseñas no coinciden")
        if self.new_password == self.current_password:
            raise ValueError("La nueva contraseña debe ser diferente a la actual")
        return self


class UserFilter(RequestModel):
    page: int = 1
    limit: int = 10
    role: Optional[str] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None
    created_after: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class AuthResult(ReadModel):
    user: PublicUser
    token: str


class UserPage(ReadModel):
    users: list[PublicUser]
    pagination: Pagination


class RoleStats(ReadModel):
    role: str
    count: int
    active: int


class UserStats(ReadModel):
    total: int
    active: int
    inactive: int
    by_role: list[RoleStats]
