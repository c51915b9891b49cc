"""Authentication API endpoints."""

import structlog
from fastapi import APIRouter, Depends, status

from rest_auth.api.dependencies import get_auth_service, get_current_user
from rest_auth.models.auth import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
    UserProfile,
)
from rest_auth.models.user import User
from rest_auth.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new user and sign them in.

    Returns:
        AuthResponse with a token pair and the new user's profile

    Raises:
        EmailExistsError (409): If the email is already registered
    """
    result = await auth_service.register(
        email=request.email,
        password=request.password,
        name=request.name,
    )
    return result.to_response()


@router.post("/login")
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Login with email and password.

    Raises:
        InvalidCredentialsError (401): If the email or password is wrong
    """
    result = await auth_service.login(email=request.email, password=request.password)
    return result.to_response()


@router.post("/refresh-token")
async def refresh_token(
    request: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenPair:
    """Exchange a refresh token for a new token pair.

    The presented refresh token is consumed; use the one in the response next.

    Raises:
        InvalidRefreshTokenError (401): If the token and email don't match,
            or the token has expired or was already used
    """
    return await auth_service.refresh(
        email=request.email,
        refresh_token=request.refresh_token,
    )


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)) -> UserProfile:
    """Get the profile of the user owning the bearer access token."""
    return UserProfile.from_user(current_user)
