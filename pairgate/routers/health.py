"""Health check endpoints for container orchestration."""

from typing import Any

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse

from pairgate.store import check_store_connection

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=None)
async def health_check() -> Response:
    """
    Health check endpoint with record store status.

    Returns:
        {"status": "healthy", "store": "connected"} when the data directory is usable
        {"status": "degraded", "store": "disconnected"} otherwise
    """
    if await check_store_connection():
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "healthy", "store": "connected"},
        )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "degraded", "store": "disconnected"},
    )


@router.get("/health/live")
async def liveness_probe() -> dict[str, Any]:
    """Liveness probe. Does not check the record store."""
    return {"status": "alive"}


@router.get("/health/ready", response_model=None)
async def readiness_probe() -> Response:
    """Readiness probe: ready only when the record store is usable."""
    if await check_store_connection():
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "ready", "store": "connected"},
        )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "store": "disconnected"},
    )
