"""FastAPI dependencies for service wiring and authentication."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rest_auth.errors import InvalidAccessTokenError
from rest_auth.models.user import User
from rest_auth.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service() -> AuthService:
    """Build the authentication service with its default stores."""
    return AuthService()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Extract and validate the current user from a JWT Bearer token.

    Raises:
        InvalidAccessTokenError: If the header is missing, the token is
            invalid or expired, or the user no longer exists
    """
    if credentials is None:
        raise InvalidAccessTokenError("Missing bearer token")
    return await auth_service.authenticate(credentials.credentials)
