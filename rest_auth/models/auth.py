"""Auth request and response models with validation.

Request models validate shape only (presence, email format, length). Field
names on the wire are camelCase; errors are reported against the wire names.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from rest_auth.models.user import User, UserRole


def normalize_email(value: str) -> str:
    """Lower-case and trim an email address for storage and lookup."""
    return value.strip().lower()


class RegisterRequest(BaseModel):
    """Sign-up payload.

    Attributes:
        email: Account email, unique across users
        password: Plain-text password (6-128 chars)
        name: Optional display name (max 128 chars)

    Any other field, ``role`` included, is ignored.
    """

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: Optional[str] = Field(default=None, max_length=128)

    @field_validator("email")
    @classmethod
    def email_normalized(cls, v: str) -> str:
        """Lower-case the address once its format has passed."""
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        """Trim surrounding whitespace from the display name."""
        return v.strip() if v is not None else v


class LoginRequest(BaseModel):
    """Login credentials."""

    email: EmailStr
    password: str = Field(..., max_length=128)

    @field_validator("email")
    @classmethod
    def email_normalized(cls, v: str) -> str:
        """Lower-case the address once its format has passed."""
        return normalize_email(v)


class RefreshTokenRequest(BaseModel):
    """Request to exchange a refresh token for a new token pair."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    refresh_token: str = Field(..., alias="refreshToken")

    @field_validator("email")
    @classmethod
    def email_normalized(cls, v: str) -> str:
        """Lower-case the address once its format has passed."""
        return normalize_email(v)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenPair(_CamelModel):
    """Access and refresh tokens with access token lifetime.

    Attributes:
        token_type: Always "Bearer"
        access_token: Short-lived signed JWT
        refresh_token: Long-lived opaque token, persisted server-side
        expires_in: Access token lifetime in seconds
    """

    token_type: str = "Bearer"
    access_token: str
    refresh_token: str
    expires_in: int = Field(ge=1, description="Access token lifetime in seconds")


class UserProfile(_CamelModel):
    """Public projection of a user. Never includes the password."""

    id: UUID
    email: str
    name: Optional[str] = None
    role: UserRole
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
        )


class AuthResponse(_CamelModel):
    """Register/login result: a token pair plus the user profile."""

    token: TokenPair
    user: UserProfile
