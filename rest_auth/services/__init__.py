"""Services package exports."""

from rest_auth.services.auth_service import AuthResult, AuthService
from rest_auth.services.logging_service import configure_logging, get_logger
from rest_auth.services.password_service import PasswordService
from rest_auth.services.refresh_token_service import RefreshTokenService
from rest_auth.services.token_service import TokenConfig, TokenService
from rest_auth.services.user_service import UserService

__all__ = [
    "AuthResult",
    "AuthService",
    "PasswordService",
    "RefreshTokenService",
    "TokenConfig",
    "TokenService",
    "UserService",
    "configure_logging",
    "get_logger",
]
