"""Credential store: persisted user records with hashed passwords."""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from rest_auth.database import get_pool
from rest_auth.errors import DuplicateEmailError
from rest_auth.models.auth import normalize_email
from rest_auth.models.user import User, UserRole
from rest_auth.services.password_service import PasswordService

logger = structlog.get_logger(__name__)


def _row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        role=UserRole(row["role"]),
        created_at=row["created_at"],
    )


class UserService:
    """Service for creating and looking up users."""

    def __init__(self, password_service: Optional[PasswordService] = None):
        self.password_service = password_service or PasswordService()

    async def create_user(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Create a new user with a hashed password.

        Email uniqueness is enforced by the users_email_key index, so two
        concurrent registrations for one address cannot both succeed.

        Args:
            email: Account email (normalized before storage)
            password: Plain-text password (will be hashed)
            name: Optional display name
            role: Account role

        Returns:
            Created User model

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        user_id = uuid4()
        email = normalize_email(email)
        now = datetime.now(timezone.utc)
        password_hash = await self.password_service.hash_password_async(password)

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO users (id, email, password_hash, name, role, created_at)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    """,
                    user_id,
                    email,
                    password_hash,
                    name,
                    role.value,
                    now,
                )
        except asyncpg.UniqueViolationError:
            logger.info("user_create_duplicate_email", email=email)
            raise DuplicateEmailError(email)

        logger.info(
            "user_created",
            user_id=str(user_id),
            email=email,
            role=role.value,
        )

        return User(
            id=user_id,
            email=email,
            name=name,
            role=role,
            created_at=now,
        )

    async def get_by_email(self, email: str) -> Optional[tuple[User, str]]:
        """Get a user by email (case-insensitive).

        Args:
            email: Email to look up

        Returns:
            Tuple of (User, password_hash) or None if not found
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT id, email, password_hash, name, role, created_at
                FROM users
                WHERE email = $1
                """,
                normalize_email(email),
            )

        if row is None:
            return None

        return _row_to_user(row), row["password_hash"]

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by UUID.

        Args:
            user_id: User UUID

        Returns:
            User model or None if not found
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT id, email, name, role, created_at
                FROM users
                WHERE id = $1
                """,
                user_id,
            )

        if row is None:
            return None

        return _row_to_user(row)
