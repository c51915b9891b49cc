"""User and refresh token records."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class UserRole(str, Enum):
    """Roles a user account can carry."""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """A registered account. Never carries the password or its hash."""

    id: UUID
    email: str
    name: Optional[str] = None
    role: UserRole = UserRole.USER
    created_at: datetime


class RefreshToken(BaseModel):
    """A persisted refresh token. Deleting the row revokes it.

    Only the sha256 digest of the token value is kept.
    """

    token_hash: str
    user_id: UUID
    user_email: str
    expires: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires <= now
