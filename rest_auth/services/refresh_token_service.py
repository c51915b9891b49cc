"""Refresh token store backed by the refresh_tokens table."""

import hashlib
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import UUID

import structlog

from rest_auth.database import get_pool
from rest_auth.models.auth import normalize_email
from rest_auth.models.user import RefreshToken

logger = structlog.get_logger(__name__)


def hash_refresh_token(token: str) -> str:
    """Digest under which a refresh token value is stored and looked up."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _row_to_token(row: Mapping[str, Any]) -> RefreshToken:
    return RefreshToken(
        token_hash=row["token_hash"],
        user_id=row["user_id"],
        user_email=row["user_email"],
        expires=row["expires"],
    )


class RefreshTokenService:
    """Persistence for refresh tokens.

    Rows are keyed by the token digest, never the token itself. Lookups
    match on the (token, user_email) pair: a token value presented
    with another account's email never matches.
    """

    async def create(
        self,
        token: str,
        user_id: UUID,
        user_email: str,
        expires: datetime,
    ) -> RefreshToken:
        """Store a refresh token.

        Args:
            token: Opaque token value; only its digest is stored
            user_id: Owning user's UUID
            user_email: Owning user's email (denormalized for lookup)
            expires: Expiry timestamp

        Returns:
            The stored RefreshToken record
        """
        record = RefreshToken(
            token_hash=hash_refresh_token(token),
            user_id=user_id,
            user_email=normalize_email(user_email),
            expires=expires,
        )

        pool = await get_pool()

        async with pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO refresh_tokens (token_hash, user_id, user_email, expires)
                VALUES ($1, $2, $3, $4)
                """,
                record.token_hash,
                record.user_id,
                record.user_email,
                record.expires,
            )

        logger.info(
            "refresh_token_created",
            user_id=str(user_id),
            expires=expires.isoformat(),
        )
        return record

    async def find_one(self, token: str, user_email: str) -> Optional[RefreshToken]:
        """Find a refresh token by value and owning email.

        Returns:
            The RefreshToken (expired or not) or None if no row matches
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT token_hash, user_id, user_email, expires
                FROM refresh_tokens
                WHERE token_hash = $1 AND user_email = $2
                """,
                hash_refresh_token(token),
                normalize_email(user_email),
            )

        if row is None:
            return None
        return _row_to_token(row)

    async def consume(self, token: str, user_email: str) -> Optional[RefreshToken]:
        """Atomically delete and return a refresh token.

        A token can be consumed at most once; concurrent callers racing on the
        same value see exactly one winner.

        Returns:
            The deleted RefreshToken or None if no row matched
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                DELETE FROM refresh_tokens
                WHERE token_hash = $1 AND user_email = $2
                RETURNING token_hash, user_id, user_email, expires
                """,
                hash_refresh_token(token),
                normalize_email(user_email),
            )

        if row is None:
            return None

        logger.info("refresh_token_consumed", user_id=str(row["user_id"]))
        return _row_to_token(row)

    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        """Purge refresh tokens whose expiry has passed.

        Returns:
            Number of rows deleted
        """
        now = now or datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM refresh_tokens WHERE expires <= $1",
                now,
            )

        # asyncpg returns the command tag, e.g. "DELETE 3"
        deleted = int(result.split()[-1]) if result else 0
        logger.info("expired_refresh_tokens_deleted", count=deleted)
        return deleted
