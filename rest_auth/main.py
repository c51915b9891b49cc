"""FastAPI application initialization."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rest_auth import database
from rest_auth.api.auth import router as auth_router
from rest_auth.api.error_handlers import register_error_handlers
from rest_auth.api.middleware import CorrelationIdMiddleware
from rest_auth.api.routes import router as health_router
from rest_auth.api.routes import status_router
from rest_auth.config import get_settings
from rest_auth.services.logging_service import configure_logging, get_logger
from rest_auth.services.password_service import PasswordService
from rest_auth.services.refresh_token_service import RefreshTokenService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    # Warm the dummy hash used for unknown-email logins
    PasswordService()

    try:
        await database.init_database()
        await database.run_migrations()
        await RefreshTokenService().delete_expired()
        logger.info("database_initialized")
    except Exception as e:
        logger.warning(
            "database_initialization_failed",
            error=str(e),
            note="Continuing without database - auth endpoints will fail until it is reachable",
        )

    logger.info("application_started", env=settings.env, log_level=settings.log_level)

    yield

    await database.close_database()
    logger.info("application_shutdown")


app = FastAPI(
    title="REST Auth API",
    description="User registration, login and refresh-token session renewal",
    version="1.0.0",
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

api_v1 = APIRouter(prefix="/v1")
api_v1.include_router(status_router)
api_v1.include_router(auth_router)

app.include_router(api_v1)
app.include_router(health_router)
