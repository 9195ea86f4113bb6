"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI

from authgraph.core.config import settings
from authgraph.core.logging import configure_logging
from authgraph.api.routes import router as api_router
from authgraph.api.middleware.logging import LoggingMiddleware
from authgraph.rbac.cache import access_cache

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    from authgraph.models.database import init_db, close_db

    configure_logging()
    # Read-only surface: stale answers are acceptable here when opted in
    if settings.authz.cache_enabled:
        access_cache.enable()
    await init_db()
    logger.info("app.startup", cache_enabled=access_cache.enabled)

    yield

    access_cache.disable()
    await close_db()
    logger.info("app.shutdown")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Quick health check endpoint (for load balancers)."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "authgraph.main:app",
        host="0.0.0.0",
        port=8000,
    )
