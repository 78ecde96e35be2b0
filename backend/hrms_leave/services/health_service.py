"""
Health service.
Provides health check functionality.
"""

import asyncio
import time

import aiohttp

from hrms_leave.core.config import settings
from hrms_leave.core.integrations.http.http_client import HttpClient
from hrms_leave.services.base_service import BaseService
from hrms_leave.schemas.health import HealthResponse


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self):
        self.start_time = time.time()

    async def get_health(self) -> HealthResponse:
        """
        Get system health status.

        Returns:
            HealthResponse with status, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)
        uptime_str = f"PT{uptime_seconds}S"  # ISO 8601 duration format

        checks = {"hr_backend": await self._check_hr_backend()}

        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"

        return HealthResponse(
            status=status,
            version=settings.VERSION,
            uptime=uptime_str,
            checks=checks,
        )

    async def _check_hr_backend(self) -> str:
        """The HR backend counts as reachable if it answers at all."""
        async with HttpClient(base_url=settings.HR_API_BASE_URL, timeout=2, max_retries=1) as client:
            try:
                await client.get("/")
            except aiohttp.ClientResponseError:
                return "ok"
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                return f"error: {str(e) or type(e).__name__}"
        return "ok"
