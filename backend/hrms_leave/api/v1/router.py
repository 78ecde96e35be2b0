"""
API v1 router that aggregates all endpoint routers.
"""

from fastapi import APIRouter

from hrms_leave.api.v1.endpoints import (
    health,
    leave_eligibility,
    leave_applications,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(
    leave_eligibility.router,
    prefix="/leave-eligibility",
    tags=["leave-eligibility"],
)
# Bearer token required; it is forwarded to the HR backend
api_router.include_router(
    leave_applications.router,
    prefix="/employees",
    tags=["leave-applications"],
)
