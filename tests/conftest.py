"""
Pytest configuration and fixtures.
Provides the test app client and builders for policies and date facts.
"""

import os

# Must be set before the app (and its settings) are imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import date
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from hrms_leave.main import app
from hrms_leave.schemas.date_fact import DateFact, ExistingLeave, LeaveSession, TypeOfDay
from hrms_leave.schemas.leave_policy import PolicyDescriptor


ALL_SESSIONS = frozenset({
    LeaveSession.FULL_DAY,
    LeaveSession.FIRST_HALF,
    LeaveSession.SECOND_HALF,
})


def make_policy(**overrides) -> PolicyDescriptor:
    """Annual-leave style policy unless overridden."""
    fields = {
        "leave_type_id": "AL",
        "requires_consecutive_days": False,
        "allows_half_day": True,
        "requires_attachment": False,
        "allows_backdate": False,
        "max_days_per_application": None,
        "notice_lead_days": 0,
        "note": "",
    }
    fields.update(overrides)
    return PolicyDescriptor(**fields)


def make_fact(
    day: date,
    type_of_day: TypeOfDay = TypeOfDay.WORKING,
    sessions=ALL_SESSIONS,
    existing_leave_code: str = None,
    holiday_name: str = None,
) -> DateFact:
    existing = ExistingLeave(leave_code=existing_leave_code, approval_status="Approved") if existing_leave_code else None
    return DateFact(
        date=day,
        type_of_day=type_of_day,
        holiday_name=holiday_name,
        available_sessions=frozenset(sessions),
        existing_leave=existing,
    )


@pytest.fixture
def policy_factory():
    return make_policy


@pytest.fixture
def fact_factory():
    return make_fact


@pytest.fixture
def form_repositories():
    """AsyncMock stand-ins for the HR backend repositories."""
    fact_repo = AsyncMock()
    policy_repo = AsyncMock()
    application_repo = AsyncMock()
    application_repo.create.return_value = "APP-1"
    return fact_repo, policy_repo, application_repo


@pytest.fixture(scope="function")
async def test_client():
    """
    Create a test HTTP client.
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
