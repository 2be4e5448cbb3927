"""Main FastAPI application for the SydAI API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from sydai import __version__
from sydai.api.rate_limit import limiter
from sydai.api.v1.auth import router as auth_router
from sydai.api.v1.checkin import router as checkin_router
from sydai.api.v1.leaderboard import router as leaderboard_router
from sydai.api.v1.messages import router as messages_router
from sydai.api.v1.notifications import router as notifications_router
from sydai.api.v1.referral import router as referral_router
from sydai.api.v1.settings import router as settings_router
from sydai.exceptions import PointsError
from sydai.logging_config import configure_logging, get_logger
from sydai.services import build_services
from sydai.settings import Settings, settings as default_settings, validate_production_settings
from sydai.storage.db import Database
from sydai.storage.models import Clock, utcnow

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Prevent clickjacking - don't allow embedding in iframes
        response.headers["X-Frame-Options"] = "DENY"

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Referrer Policy - don't leak URLs to other sites
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


def create_app(
    config: Settings | None = None,
    database: Database | None = None,
    clock: Clock = utcnow,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Settings (defaults to environment settings)
        database: Database to use; created from ``config.database_url`` when omitted
        clock: Source of the current UTC instant for time-dependent services

    Returns:
        Configured FastAPI app
    """
    config = config or default_settings
    validate_production_settings(config)
    configure_logging(config)

    owns_database = database is None
    if database is None:
        database = Database(config.database_url, echo=config.sql_echo)

    services = build_services(database, config, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("app_starting", env=config.env)
        database.create_tables()

        yield

        logger.info("app_shutting_down")
        if owns_database:
            services.close()

    # Hide API docs in production
    is_production = config.is_production

    app = FastAPI(
        title="SydAI API",
        description="Gamified chat: points, daily check-ins, leaderboard and referrals",
        version=__version__,
        docs_url=None if is_production else "/api/docs",
        redoc_url=None if is_production else "/api/redoc",
        openapi_url=None if is_production else "/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.services = services

    # Security Headers middleware (must be added before CORS)
    app.add_middleware(SecurityHeadersMiddleware)

    allowed_origins = [
        origin.strip()
        for origin in config.allowed_origins.split(",")
        if origin.strip()
    ]

    # Block wildcard in production
    if is_production and "*" in allowed_origins:
        logger.error("cors_wildcard_blocked", message="Wildcard CORS not allowed in production")
        allowed_origins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        max_age=3600,
    )

    # Rate limiting (shared instance from rate_limit module)
    app.state.limiter = limiter

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many requests. Please try again later."},
        )

    @app.exception_handler(PointsError)
    async def points_error_handler(request: Request, exc: PointsError):
        logger.info("request_rejected", path=request.url.path, code=exc.code)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    # Include v1 API routers
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(messages_router, prefix="/api/v1")
    app.include_router(checkin_router, prefix="/api/v1")
    app.include_router(leaderboard_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")
    app.include_router(settings_router, prefix="/api/v1")
    app.include_router(referral_router, prefix="/api/v1")

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "env": config.env,
        }

    return app
