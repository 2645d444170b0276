"""
Health check API endpoints.

Routes: GET /health, GET /health/store

Dependencies: convoquota.boundary.store
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from convoquota.api.deps import get_session_store, get_settings_dependency
from convoquota.boundary.store.session_store import SessionStore
from convoquota.configs import Settings
from convoquota.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/store", response_model=HealthResponse)
async def health_check_store(
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings_dependency),
):
    """Session store health check."""
    try:
        await store.ping()
    except StoreUnavailableError:
        logger.exception(f"{__name__}:health_check_store - store unreachable")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "message": "Session store unavailable"},
        )
    return HealthResponse(
        status="healthy",
        message=f"Session store ({settings.store.backend}) reachable",
    )
