"""asyncpg pool shared by the user and refresh-token stores, plus schema setup."""

from pathlib import Path
from typing import Optional

import asyncpg
import structlog

from rest_auth.config import get_settings

logger = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_pool: Optional[asyncpg.Pool] = None


async def get_pool() -> asyncpg.Pool:
    """Return the pool opened by init_database().

    Raises:
        RuntimeError: If init_database() has not run
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_database() first.")
    return _pool


async def init_database() -> asyncpg.Pool:
    """Open the pool on first call; later calls return the same pool."""
    global _pool

    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            settings.postgres_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout_seconds,
        )
        logger.info(
            "auth_db_pool_opened",
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
    return _pool


async def close_database() -> None:
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("auth_db_pool_closed")


async def run_migrations() -> list[str]:
    """Create the users and refresh_tokens tables if they are missing.

    Each script is idempotent, so this runs on every startup.

    Returns:
        Names of the scripts applied, in order
    """
    pool = await get_pool()
    scripts = sorted(MIGRATIONS_DIR.glob("*.sql"))

    async with pool.acquire() as conn:
        for script in scripts:
            await conn.execute(script.read_text())

    applied = [script.name for script in scripts]
    logger.info("auth_schema_ready", scripts=applied)
    return applied


async def health_check() -> bool:
    """True when a pooled connection answers a trivial query."""
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1
    except (RuntimeError, OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        logger.warning("auth_db_unreachable", error=str(e))
        return False
