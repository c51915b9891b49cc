"""Token issuer: signed JWT access tokens and persisted opaque refresh tokens."""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog

from rest_auth.config import Settings, get_settings
from rest_auth.errors import InvalidAccessTokenError
from rest_auth.models.auth import TokenPair
from rest_auth.models.user import User
from rest_auth.services.refresh_token_service import RefreshTokenService

logger = structlog.get_logger(__name__)

# 40 random bytes, hex-encoded into the refresh token suffix
REFRESH_TOKEN_BYTES = 40


@dataclass(frozen=True)
class TokenConfig:
    """Signing secret and lifetimes for issued tokens."""

    secret: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 30

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            access_token_expire_minutes=settings.jwt_expiration_minutes,
            refresh_token_expire_days=settings.refresh_token_expire_days,
        )


class TokenService:
    """Mints access/refresh token pairs for authenticated users."""

    def __init__(
        self,
        config: Optional[TokenConfig] = None,
        refresh_tokens: Optional[RefreshTokenService] = None,
    ):
        self.config = config or TokenConfig.from_settings(get_settings())
        self.refresh_tokens = refresh_tokens or RefreshTokenService()

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self.config.access_token_expire_minutes * 60

    def issue_access_token(self, user: User) -> str:
        """Create a signed JWT access token.

        Args:
            user: Token subject; its id goes in 'sub' and its role in 'role'

        Returns:
            Encoded JWT string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "role": user.role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self.config.access_token_expire_minutes),
        }
        token = jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)
        logger.debug(
            "access_token_created",
            user_id=str(user.id),
            expires_minutes=self.config.access_token_expire_minutes,
        )
        return token

    def validate_access_token(self, token: str) -> dict:
        """Decode and validate a JWT access token.

        Args:
            token: Encoded JWT string

        Returns:
            Decoded payload dict with sub, role, iat, exp

        Raises:
            InvalidAccessTokenError: If the token is invalid, expired, or malformed
        """
        try:
            return jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidAccessTokenError("Access token has expired")
        except jwt.InvalidTokenError as e:
            logger.info("access_token_rejected", reason=str(e))
            raise InvalidAccessTokenError()

    def issue_refresh_token(self, user: User) -> str:
        """Generate an opaque refresh token scoped to the user.

        Format is ``<user id hex>.<80 random hex chars>``; only the random
        suffix carries the unguessability.
        """
        return f"{user.id.hex}.{secrets.token_hex(REFRESH_TOKEN_BYTES)}"

    def refresh_token_expiry(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.now(timezone.utc)
        return now + timedelta(days=self.config.refresh_token_expire_days)

    async def issue_token_pair(self, user: User) -> TokenPair:
        """Mint an access token and a persisted refresh token.

        The refresh token is stored before the pair is returned.
        """
        access_token = self.issue_access_token(user)
        refresh_token = self.issue_refresh_token(user)

        await self.refresh_tokens.create(
            token=refresh_token,
            user_id=user.id,
            user_email=user.email,
            expires=self.refresh_token_expiry(),
        )

        return TokenPair(
            token_type="Bearer",
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.expires_in,
        )
