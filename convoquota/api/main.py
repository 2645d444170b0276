"""
FastAPI application with assembled routers.

Builds the app, wires middleware and the versioned routers, and owns the
service cache lifecycle (table creation, pre-warm, engine disposal).

Dependencies: fastapi, convoquota.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from convoquota import __version__
from convoquota.api.deps.dependencies import get_service_cache
from convoquota.configs import get_settings
from convoquota.observability.logger import configure_logging
from convoquota.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import (
    conversations_router,
    exchange_router,
    health_router,
    sessions_router,
)

API_PREFIX = "/api/v1"
ROUTERS = (health_router, sessions_router, exchange_router, conversations_router)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, prepare the store on startup and release it on shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("uvicorn")

    cache = get_service_cache()
    if settings.store.create_tables and cache.engine is not None:
        from convoquota.boundary.db.create_tables import create_all_tables

        await create_all_tables(cache.engine)
        logger.info("Database tables ensured")

    # Trigger property access so configuration errors surface at startup
    _ = cache.session_store
    _ = cache.quota_enforcer
    _ = cache.classifier
    _ = cache.account_resolver
    logger.info(f"Service cache pre-warmed (store backend: {settings.store.backend})")

    yield

    await cache.aclose()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="ConvoQuota API",
        description="Quota-metered conversational Q&A with billable-answer classification",
        version=__version__,
        lifespan=lifespan,
    )

    # Last added runs first: CORS, then correlation, then request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "convoquota.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
