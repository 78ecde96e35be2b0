"""
Day-count helpers.
"""

from decimal import Decimal
from typing import Iterable, Optional

from hrms_leave.schemas.date_fact import LeaveSession


DAY_WEIGHTS = {
    LeaveSession.FULL_DAY: Decimal("1"),
    LeaveSession.FIRST_HALF: Decimal("0.5"),
    LeaveSession.SECOND_HALF: Decimal("0.5"),
}


def day_weight(session: Optional[LeaveSession]) -> Decimal:
    """Effective leave-days one date contributes when taken in the given session."""
    return DAY_WEIGHTS.get(session, Decimal("0"))


def calculate_total_days(entries: Iterable) -> Decimal:
    """
    Sum the day weight of every included selection entry.

    Args:
        entries: Objects exposing ``included`` and ``session``

    Returns:
        Total effective leave-days
    """
    total = Decimal("0")
    for entry in entries:
        if entry.included:
            total += day_weight(entry.session)
    return total
