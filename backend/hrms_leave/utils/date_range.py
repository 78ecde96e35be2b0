"""
Date range helpers.
"""

from datetime import date, timedelta
from typing import Iterable

from hrms_leave.core.exceptions import InvalidDateRangeError
from hrms_leave.schemas.date_fact import DateFact


def validate_date_range(date_from: date, date_to: date, max_range_days: int) -> None:
    """
    Fail fast on a range that cannot be evaluated.

    Raises:
        InvalidDateRangeError: If the range is reversed or longer than allowed
    """
    if date_to < date_from:
        raise InvalidDateRangeError(
            "End date must not be before the start date",
            details={"date_from": date_from.isoformat(), "date_to": date_to.isoformat()},
        )
    if date_to - date_from >= timedelta(days=max_range_days):
        raise InvalidDateRangeError(
            f"Date range cannot exceed {max_range_days} days",
            details={"date_from": date_from.isoformat(), "date_to": date_to.isoformat()},
        )


def check_facts_in_range(facts: Iterable[DateFact], date_from: date, date_to: date) -> None:
    """
    Raises:
        InvalidDateRangeError: If a fact's date lies outside [date_from, date_to]
    """
    outside = sorted(fact.date for fact in facts if not date_from <= fact.date <= date_to)
    if outside:
        raise InvalidDateRangeError(
            "Date facts must lie within the requested range",
            details={
                "date_from": date_from.isoformat(),
                "date_to": date_to.isoformat(),
                "outside": [d.isoformat() for d in outside],
            },
        )
