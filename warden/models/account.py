"""
Account Models
==============

Models for user accounts, their request payloads and public views.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


PASSWORD_MIN_LEN = 6
USERNAME_MAX_LEN = 255


class Role(str, Enum):
    """Account roles."""

    USER = "user"
    ADMIN = "admin"


def _normalize_email(v: object) -> object:
    if isinstance(v, str):
        return v.strip().lower()
    return v


class AccountPublic(BaseModel):
    """Account as exposed to clients and bound to authenticated requests."""

    id: str = Field(..., description="Unique account ID")
    username: str
    email: str
    role: Role = Role.USER
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Account(AccountPublic):
    """Stored account record, including the password hash."""

    password_hash: str = Field(..., min_length=1, repr=False)

    def to_public(self) -> AccountPublic:
        """Strip the password hash."""
        return AccountPublic.model_validate(self.model_dump(exclude={"password_hash"}))


class AccountCreate(BaseModel):
    """Registration payload. ``role`` is not accepted: new accounts are users."""

    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN)

    @field_validator("username", mode="before")
    @classmethod
    def trim_username(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v: object) -> object:
        return _normalize_email(v)


class AccountUpdate(BaseModel):
    """Update payload; at least one field must be present."""

    model_config = ConfigDict(extra="ignore")

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=PASSWORD_MIN_LEN)
    role: Role | None = None

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v: object) -> object:
        return _normalize_email(v)

    @model_validator(mode="after")
    def require_one_field(self) -> "AccountUpdate":
        if self.email is None and self.password is None and self.role is None:
            raise ValueError("at least one of email, password or role must be provided")
        return self


class LoginRequest(BaseModel):
    """Credentials for login."""

    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def trim_username(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v


class AccountResponse(BaseModel):
    """Single-account response body."""

    message: str | None = None
    user: AccountPublic


class UsernameItem(BaseModel):
    username: str


class UsernameListResponse(BaseModel):
    """Response for GET /users: usernames only."""

    users: list[UsernameItem]
    count: int


def utcnow() -> datetime:
    """Timestamp source for store writes."""
    return datetime.now(UTC)
