"""
Health Check Route

Simple health check endpoint for liveness probes.
"""

from fastapi import APIRouter

from api.models.responses import HealthResponse
from core.merkle import list_hash_schemes


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service status and the registered hash schemes.
    """
    return HealthResponse(
        ok=True,
        service="sparse-merkle-api",
        version="v1",
        schemes=list_hash_schemes(),
    )


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """
    Root endpoint - same as health check.
    """
    return await health_check()
