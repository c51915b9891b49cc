"""Error hierarchy for the authentication API.

Every error raised toward the HTTP boundary derives from AuthApiError and
renders itself with to_response() as ``{"code", "message", "errors"?}``, where
``code`` mirrors the HTTP status.

Store-level conditions (DuplicateEmailError) are plain exceptions; the
authentication service translates them before they reach the boundary.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Union


@dataclass
class FieldError:
    """A single field-level failure: which field, where it came from, and why."""

    field: Union[str, list[str]]
    location: str
    messages: list[str] = field(default_factory=list)
    types: Optional[list[str]] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if data["types"] is None:
            data.pop("types")
        return data


class AuthApiError(Exception):
    """Base exception for all errors surfaced by the authentication API."""

    def __init__(
        self,
        message: str,
        error_code: str,
        http_status: int = 500,
        errors: Optional[list[FieldError]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.http_status = http_status
        self.errors = errors or []

    def to_response(self) -> dict[str, Any]:
        """Convert to the REST error envelope."""
        body: dict[str, Any] = {"code": self.http_status, "message": self.message}
        if self.errors:
            body["errors"] = [e.to_dict() for e in self.errors]
        return body


# ─── 400 ─────────────────────────────────────────────────────────

class ValidationError(AuthApiError):
    """One or more request fields failed validation."""

    def __init__(self, errors: list[FieldError]):
        super().__init__("Validation Error", "VALIDATION_ERROR", 400, errors)


# ─── 401 ─────────────────────────────────────────────────────────

class InvalidCredentialsError(AuthApiError):
    """Login failed. Deliberately silent about which credential was wrong."""

    def __init__(self):
        super().__init__("Incorrect email or password", "INVALID_CREDENTIALS", 401)


class InvalidRefreshTokenError(AuthApiError):
    """Refresh failed. Deliberately silent about whether token or email was wrong."""

    def __init__(self):
        super().__init__(
            "Incorrect email or refreshToken", "INVALID_REFRESH_TOKEN", 401
        )


class InvalidAccessTokenError(AuthApiError):
    """Bearer access token is missing, expired, tampered or orphaned."""

    def __init__(self, message: str = "Invalid or expired access token"):
        super().__init__(message, "INVALID_ACCESS_TOKEN", 401)


# ─── 409 ─────────────────────────────────────────────────────────

class EmailExistsError(AuthApiError):
    """Registration attempted with an email that is already taken."""

    def __init__(self):
        super().__init__(
            "Validation Error",
            "EMAIL_EXISTS",
            409,
            [
                FieldError(
                    field="email",
                    location="body",
                    messages=['"email" already exists'],
                )
            ],
        )


# ─── Store-level ─────────────────────────────────────────────────

class DuplicateEmailError(Exception):
    """The credential store already holds a user with this email."""

    def __init__(self, email: str):
        super().__init__(f"User with email {email!r} already exists")
        self.email = email
