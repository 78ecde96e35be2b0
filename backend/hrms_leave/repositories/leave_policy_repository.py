"""
Leave policy repository.
"""

from hrms_leave.core.exceptions import FactsUnavailableError
from hrms_leave.repositories.base_repository import BaseRepository
from hrms_leave.schemas.leave_policy import PolicyDescriptor


class LeavePolicyRepository(BaseRepository):
    """Repository for leave type policies."""

    async def get_policy(self, leave_type_id: str) -> PolicyDescriptor:
        """
        Get the policy of a leave type.

        Raises:
            FactsUnavailableError: If the fetch fails or the policy is malformed
        """
        data = await self._get_data(f"{self.employee_path}/leaves/types/{leave_type_id}/policy")
        if not isinstance(data, dict):
            raise FactsUnavailableError(
                "HR backend returned no policy",
                details={"leave_type_id": leave_type_id},
            )
        try:
            return PolicyDescriptor(
                leave_type_id=data.get("leaveCode") or leave_type_id,
                requires_consecutive_days=bool(data.get("isConsecutive", False)),
                allows_half_day=bool(data.get("isAllowHalfDay", False)),
                requires_attachment=bool(data.get("isRequireAttachment", False)),
                allows_backdate=bool(data.get("isAllowBackdate", False)),
                max_days_per_application=data.get("maxDaysPerApplication"),
                notice_lead_days=data.get("noticeDays") or 0,
                note=data.get("note") or "",
            )
        except ValueError as e:
            raise FactsUnavailableError(
                "HR backend returned a malformed policy",
                details={"leave_type_id": leave_type_id, "error": str(e)},
            ) from e
