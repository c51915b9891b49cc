"""Password hashing and verification with bcrypt."""

import asyncio
from functools import lru_cache
from typing import Optional

import bcrypt
import structlog

from rest_auth.config import get_settings

logger = structlog.get_logger(__name__)

# bcrypt only reads the first 72 bytes of input; newer releases refuse longer input.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> bytes:
    """A throwaway hash at the given cost, computed once per process."""
    return bcrypt.hashpw(b"", bcrypt.gensalt(rounds=rounds))


class PasswordService:
    """One-way salted password hashing.

    bcrypt embeds the salt and cost factor in its output, so a stored hash is
    all that is needed to verify a candidate password later.
    """

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds if rounds is not None else get_settings().bcrypt_rounds
        # One per cost factor per process, never built on the login path
        self._dummy_hash = _dummy_hash(self.rounds)

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(_encode(password), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash in constant time.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise (including
            when the stored hash is malformed)
        """
        try:
            return bcrypt.checkpw(
                _encode(password),
                password_hash.encode("utf-8"),
            )
        except ValueError:
            logger.warning("password_hash_malformed")
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend one verification's worth of work on a hash nobody owns.

        Called when no account matches so that "unknown email" takes as long
        as "wrong password". Always returns False.
        """
        bcrypt.checkpw(_encode(password), self._dummy_hash)
        return False

    async def hash_password_async(self, password: str) -> str:
        """hash_password on a worker thread, off the event loop."""
        return await asyncio.to_thread(self.hash_password, password)

    async def verify_password_async(
        self, password: str, password_hash: Optional[str]
    ) -> bool:
        """verify_password on a worker thread; a None hash runs verify_dummy."""
        if password_hash is None:
            return await asyncio.to_thread(self.verify_dummy, password)
        return await asyncio.to_thread(self.verify_password, password, password_hash)
