"""Status and health endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from rest_auth.database import health_check as db_health_check

router = APIRouter()
status_router = APIRouter()


@status_router.get("/status")
async def api_status() -> dict:
    """Liveness probe for the versioned API."""
    return {"status": "OK"}


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Status, timestamp in ISO8601 format, and database health
    """
    db_healthy = await db_health_check()
    return {
        "status": "healthy" if db_healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "healthy" if db_healthy else "unhealthy",
    }
