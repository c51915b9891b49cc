"""Authentication flows: register, login, refresh.

Each flow is stateless across calls; all state lives in the user and
refresh-token stores. Login and refresh collapse their distinct failure
causes into one error each, so responses never reveal whether an account
exists.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import structlog

from rest_auth.errors import (
    DuplicateEmailError,
    EmailExistsError,
    InvalidAccessTokenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
)
from rest_auth.models.auth import AuthResponse, TokenPair, UserProfile
from rest_auth.models.user import User
from rest_auth.services.password_service import PasswordService
from rest_auth.services.refresh_token_service import RefreshTokenService
from rest_auth.services.token_service import TokenService
from rest_auth.services.user_service import UserService

logger = structlog.get_logger(__name__)


@dataclass
class AuthResult:
    """Token pair plus the authenticated user."""

    token: TokenPair
    user: User

    def to_response(self) -> AuthResponse:
        return AuthResponse(token=self.token, user=UserProfile.from_user(self.user))


class AuthService:
    """Orchestrates the credential store, password verifier and token issuer."""

    def __init__(
        self,
        users: Optional[UserService] = None,
        refresh_tokens: Optional[RefreshTokenService] = None,
        tokens: Optional[TokenService] = None,
        passwords: Optional[PasswordService] = None,
    ):
        self.passwords = passwords or PasswordService()
        self.users = users or UserService(self.passwords)
        self.refresh_tokens = refresh_tokens or RefreshTokenService()
        self.tokens = tokens or TokenService(refresh_tokens=self.refresh_tokens)

    async def register(
        self, email: str, password: str, name: Optional[str] = None
    ) -> AuthResult:
        """Create an account and sign it in.

        New accounts always get the default role.

        Raises:
            EmailExistsError: If the email is already registered
        """
        try:
            user = await self.users.create_user(email=email, password=password, name=name)
        except DuplicateEmailError:
            raise EmailExistsError()

        token = await self.tokens.issue_token_pair(user)
        logger.info("user_registered", user_id=str(user.id))
        return AuthResult(token=token, user=user)

    async def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and issue a token pair.

        Raises:
            InvalidCredentialsError: If no account matches or the password is wrong
        """
        result = await self.users.get_by_email(email)

        if result is None:
            await self.passwords.verify_password_async(password, None)
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentialsError()

        user, password_hash = result

        if not await self.passwords.verify_password_async(password, password_hash):
            logger.info("login_failed", reason="password_mismatch", user_id=str(user.id))
            raise InvalidCredentialsError()

        token = await self.tokens.issue_token_pair(user)
        logger.info("user_logged_in", user_id=str(user.id))
        return AuthResult(token=token, user=user)

    async def refresh(self, email: str, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair.

        The presented token is consumed: it cannot be exchanged again.

        Raises:
            InvalidRefreshTokenError: If the token is unknown, belongs to another
                email, has expired, or its user no longer exists
        """
        record = await self.refresh_tokens.consume(refresh_token, email)

        if record is None:
            logger.info("refresh_token_rejected", reason="not_found")
            raise InvalidRefreshTokenError()

        if record.is_expired(datetime.now(timezone.utc)):
            logger.info("refresh_token_rejected", reason="expired", user_id=str(record.user_id))
            raise InvalidRefreshTokenError()

        user = await self.users.get_by_id(record.user_id)
        if user is None:
            logger.warning("refresh_token_rejected", reason="user_missing", user_id=str(record.user_id))
            raise InvalidRefreshTokenError()

        token = await self.tokens.issue_token_pair(user)
        logger.info("token_refreshed", user_id=str(user.id))
        return token

    async def authenticate(self, access_token: str) -> User:
        """Resolve a bearer access token to its user.

        Raises:
            InvalidAccessTokenError: If the token is invalid or its user is gone
        """
        payload = self.tokens.validate_access_token(access_token)

        try:
            user_id = UUID(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidAccessTokenError("Invalid token payload")

        user = await self.users.get_by_id(user_id)
        if user is None:
            raise InvalidAccessTokenError("User not found")
        return user
