"""
FastAPI application setup.
"""

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from sqlalchemy import text

from quoteday.config.settings import get_settings
from quoteday.core.cache_client import close_cache_client
from quoteday.core.db import init_db, db_session
from quoteday.core.dependencies import get_cache, get_session_factory
from quoteday.core.error_handlers import setup_error_handlers
from quoteday.core.logging import configure_logging
from quoteday.middleware import RequestContextMiddleware
from quoteday.services.seed import seed_all

# Get application settings
settings = get_settings()

configure_logging(settings.log_level.value, settings.log_format)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create tables and seed static content on startup; release the cache on shutdown.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    try:
        init_db()
        if settings.quotes.seed_on_startup:
            seed_all(db_session)
        logger.info("Application startup complete")
    except Exception as e:
        logger.error(f"Application startup failed: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down application")
    await close_cache_client()
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from quoteday.api.auth_endpoints import router as auth_router
    from quoteday.api.quote_endpoints import router as quote_router
    from quoteday.api.favorites_endpoints import router as favorites_router
    from quoteday.api.history_endpoints import router as history_router
    from quoteday.api.search_endpoints import router as search_router
    app.include_router(auth_router)
    app.include_router(quote_router)
    app.include_router(favorites_router)
    app.include_router(history_router)
    app.include_router(search_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    @app.get("/health")
    async def health_check(session_factory=Depends(get_session_factory), cache=Depends(get_cache)):
        """Database and cache status."""
        details = {"database": {"status": "unknown"}, "cache": {"status": "disabled"}}

        try:
            with session_factory() as session:
                session.execute(text("SELECT 1"))
            details["database"] = {"status": "healthy"}
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            details["database"] = {"status": "unhealthy", "error": type(e).__name__}

        if cache is not None:
            details["cache"] = {"status": "healthy" if await cache.ping() else "degraded"}

        healthy = details["database"]["status"] == "healthy"
        return {
            "status": "healthy" if healthy else "unhealthy",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": details,
        }

    return app


# Create application instance
app = create_app()
