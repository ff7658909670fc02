"""
Portcullis Application Entry Point

FastAPI application setup with routers and middleware.

Portcullis is the control plane of a zero-trust network: it compiles, for
every connector, the resources it must enforce and the certificate
identities allowed to reach them, and versions that policy so connectors
know when to fetch a new one.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.cache.redis_client import close_redis, init_redis
from app.config.settings import settings
from app.control_plane.api.router import router as control_plane_router
from app.db.migrations import run_migrations
from app.db.session import close_db, init_db
from app.middleware.error_handler import setup_exception_handlers
from app.middleware.logging import LoggingMiddleware
from app.schemas.common import HealthResponse

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    # Startup
    await init_db()
    await run_migrations()  # Run migrations if RUN_MIGRATIONS_ON_STARTUP=true
    if settings.SNAPSHOT_CACHE_ENABLED:
        await init_redis()
    yield
    # Shutdown
    await close_db()
    await close_redis()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Zero-trust policy compilation service.\n\n"
            "Provides:\n"
            "- **Compilation**: per-connector allow-lists derived from groups, "
            "resources and access rules\n"
            "- **Versioning**: a per-connector version that advances only when "
            "the compiled content changes\n"
            "- **Staleness**: connectors learn when the policy they applied is behind"
        ),
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS Middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom Middleware
    application.add_middleware(LoggingMiddleware)

    # Exception Handlers
    setup_exception_handlers(application)

    # Routers
    application.include_router(control_plane_router, prefix="/api/v1")

    # Health Check
    @application.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(service=settings.APP_NAME, version=API_VERSION)

    return application


app = create_application()
