"""
Date fact repository.
Fetches per-date facts for a leave range from the HR backend.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from hrms_leave.core.exceptions import FactsUnavailableError
from hrms_leave.core.logging import get_logger
from hrms_leave.repositories.base_repository import BaseRepository
from hrms_leave.schemas.date_fact import DateFact, ExistingLeave, LeaveSession, TypeOfDay

logger = get_logger(__name__)

# Applications in these states no longer consume the date
RELEASED_APPROVAL_STATUSES = frozenset({"cancelled", "rejected"})


class DateFactRepository(BaseRepository):
    """Repository for leave date facts."""

    async def list_for_range(
        self,
        leave_type_id: str,
        date_from: date,
        date_to: date,
    ) -> List[DateFact]:
        """
        Get the facts for every date in [date_from, date_to].

        Raises:
            FactsUnavailableError: If the fetch fails or returns malformed or
                out-of-range records
        """
        data = await self._get_data(
            f"{self.employee_path}/leaves/dates",
            params={
                "LeaveCode": leave_type_id,
                "DateFrom": date_from.isoformat(),
                "DateTo": date_to.isoformat(),
            },
        )
        try:
            facts = [parse_date_fact(item) for item in data or []]
        except (KeyError, TypeError, ValueError) as e:
            raise FactsUnavailableError(
                "HR backend returned malformed date facts",
                details={"error": str(e)},
            ) from e
        outside = [f.date.isoformat() for f in facts if not date_from <= f.date <= date_to]
        if outside:
            raise FactsUnavailableError(
                "HR backend returned date facts outside the requested range",
                details={"outside": outside},
            )
        if len({f.date for f in facts}) != len(facts):
            raise FactsUnavailableError("HR backend returned duplicate date facts")
        logger.debug(
            "Fetched date facts",
            extra={"employee_id": self.employee_id, "leave_type_id": leave_type_id, "count": len(facts)},
        )
        return facts


def parse_date_fact(item: Dict[str, Any]) -> DateFact:
    """Build a DateFact from one backend record."""
    type_of_day = TypeOfDay.from_code(item.get("typeOfDay"))
    sessions = item.get("availableSessions") or [LeaveSession.NONE.session_id]
    return DateFact(
        date=date.fromisoformat(str(item["date"]).split("T")[0]),
        type_of_day=type_of_day,
        holiday_name=item.get("holidayName") if type_of_day == TypeOfDay.PUBLIC_HOLIDAY else None,
        available_sessions=frozenset(LeaveSession.from_code(code) for code in sessions),
        existing_leave=_parse_existing_leave(item.get("existingLeaveApplications") or []),
    )


def _parse_existing_leave(applications: List[Dict[str, Any]]) -> Optional[ExistingLeave]:
    for application in applications:
        status = application.get("approvalStatus")
        if status and str(status).lower() in RELEASED_APPROVAL_STATUSES:
            continue
        session = application.get("session")
        return ExistingLeave(
            leave_code=application["leaveCode"],
            session=LeaveSession.from_code(session) if session is not None else None,
            approval_status=status,
        )
    return None
