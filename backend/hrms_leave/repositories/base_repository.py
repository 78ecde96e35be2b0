"""
Base repository for HR backend resources.
Repositories read and write through the HR backend's JSON API, whose responses
are wrapped as {"success": bool, "data": ..., "message": str}.
"""

import asyncio
from typing import Any, Dict, Optional, Type

import aiohttp

from hrms_leave.core.exceptions import AppException, FactsUnavailableError
from hrms_leave.core.integrations.http.http_client import HttpClient
from hrms_leave.core.logging import get_logger

logger = get_logger(__name__)


class BaseRepository:
    """Base repository with envelope handling for HR backend calls."""

    def __init__(self, client: HttpClient, employee_id: str):
        """
        Initialize repository.

        Args:
            client: HTTP client pointed at the HR backend
            employee_id: Employee the requests are made for
        """
        self.client = client
        self.employee_id = employee_id

    @property
    def employee_path(self) -> str:
        return f"employees/{self.employee_id}"

    async def _get_data(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        GET an endpoint and return the envelope's data.

        Raises:
            FactsUnavailableError: On transport failure, an undecodable body or an
                unsuccessful envelope
        """
        try:
            body = await self.client.get(endpoint, params=params)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(
                f"HR backend request failed: {e}",
                extra={"endpoint": endpoint, "employee_id": self.employee_id},
            )
            raise FactsUnavailableError(
                "HR backend is unavailable",
                details={"endpoint": endpoint, "error": str(e)},
            ) from e
        return self._unwrap(body, endpoint, FactsUnavailableError)

    @staticmethod
    def _unwrap(body: Any, endpoint: str, error_class: Type[AppException]) -> Any:
        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            raise error_class(
                message or "HR backend returned an unsuccessful response",
                details={"endpoint": endpoint, "errors": _errors_of(body)},
            )
        return body.get("data")


def _errors_of(body: Any) -> list:
    if isinstance(body, dict):
        errors = body.get("errors") or []
        return errors if isinstance(errors, list) else [errors]
    return []
