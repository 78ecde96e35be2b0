"""
Health check endpoint.
Returns system status and uptime information.
"""

from fastapi import APIRouter, Request

from hrms_leave.schemas.health import HealthResponse
from hrms_leave.deps.di_container import get_container

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def get_health(
    request: Request,
) -> HealthResponse:
    """
    Health check endpoint.
    Returns system status, uptime, and health checks.
    """
    health_service = get_container().health_service()
    return await health_service.get_health()
