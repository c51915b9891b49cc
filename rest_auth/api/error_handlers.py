"""Global exception handlers.

- AuthApiError -> its own envelope and status
- RequestValidationError -> 400 with ordered field-level errors
- Exception (catch-all) -> 500, never leaks internal details
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rest_auth.api.validation import validation_error
from rest_auth.errors import AuthApiError

logger = structlog.get_logger(__name__)


def _correlation_headers(request: Request) -> dict[str, str]:
    correlation_id = getattr(request.state, "correlation_id", None)
    return {"X-Correlation-Id": correlation_id} if correlation_id else {}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AuthApiError)
    async def auth_api_error_handler(request: Request, exc: AuthApiError) -> JSONResponse:
        logger.info(
            "request_rejected",
            error_code=exc.error_code,
            http_status=exc.http_status,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(),
            headers=_correlation_headers(request),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = validation_error(exc.errors())
        logger.warning(
            "validation_error",
            fields=[e.field for e in error.errors],
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error.to_response(),
            headers=_correlation_headers(request),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
                "message": "Internal Server Error",
            },
            headers=_correlation_headers(request),
        )
