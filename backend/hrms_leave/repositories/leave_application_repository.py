"""
Leave application repository.
"""

import asyncio
from typing import Optional

import aiohttp

from hrms_leave.core.exceptions import SubmissionFailedError
from hrms_leave.core.logging import get_logger
from hrms_leave.repositories.base_repository import BaseRepository
from hrms_leave.schemas.leave_submission import SubmissionPayload

logger = get_logger(__name__)


class LeaveApplicationRepository(BaseRepository):
    """Repository for creating leave applications."""

    async def create(self, payload: SubmissionPayload) -> Optional[str]:
        """
        Submit a validated leave application.

        Returns:
            Application ID assigned by the HR backend, when it reports one

        Raises:
            SubmissionFailedError: If the backend is unreachable or refuses the application
        """
        endpoint = f"{self.employee_path}/leaves"
        try:
            body = await self.client.post(endpoint, json=payload.to_backend())
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise SubmissionFailedError(
                "Leave application could not be submitted",
                details={"endpoint": endpoint, "error": str(e)},
            ) from e
        data = self._unwrap(body, endpoint, SubmissionFailedError)
        application_id = data.get("applicationId") if isinstance(data, dict) else None
        logger.info(
            "Leave application submitted",
            extra={
                "employee_id": self.employee_id,
                "leave_type_id": payload.leave_type_id,
                "application_id": application_id,
            },
        )
        return str(application_id) if application_id is not None else None
