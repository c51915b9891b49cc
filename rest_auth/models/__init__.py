"""Models package exports."""

from rest_auth.models.auth import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
    UserProfile,
)
from rest_auth.models.user import RefreshToken, User, UserRole

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RefreshToken",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenPair",
    "User",
    "UserProfile",
    "UserRole",
]
