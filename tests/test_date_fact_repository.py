"""
HR backend repository tests.
"""

import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import aiohttp
import pytest

from hrms_leave.core.exceptions import FactsUnavailableError, SubmissionFailedError
from hrms_leave.repositories.date_fact_repository import DateFactRepository, parse_date_fact
from hrms_leave.repositories.leave_application_repository import LeaveApplicationRepository
from hrms_leave.repositories.leave_policy_repository import LeavePolicyRepository
from hrms_leave.schemas.date_fact import LeaveSession, TypeOfDay
from hrms_leave.schemas.leave_submission import DateSession, SubmissionPayload


def envelope(data, success=True, message=""):
    return {"success": success, "data": data, "message": message}


def test_parse_date_fact_from_backend_codes():
    fact = parse_date_fact({
        "date": "2024-05-01T00:00:00",
        "typeOfDay": "P",
        "holidayName": "Labour Day",
        "availableSessions": [1, 2, 3],
        "existingLeaveApplications": [],
    })

    assert fact.date == date(2024, 5, 1)
    assert fact.type_of_day == TypeOfDay.PUBLIC_HOLIDAY
    assert fact.holiday_name == "Labour Day"
    assert fact.offered_sessions == (LeaveSession.FULL_DAY, LeaveSession.FIRST_HALF, LeaveSession.SECOND_HALF)
    assert fact.existing_leave is None


def test_parse_date_fact_defaults_and_names():
    fact = parse_date_fact({
        "date": "2024-05-02",
        "typeOfDay": "W",
        "holidayName": "ignored",
        "availableSessions": ["Full Day", "Second Half"],
    })

    assert fact.holiday_name is None
    assert fact.available_sessions == frozenset({LeaveSession.FULL_DAY, LeaveSession.SECOND_HALF})

    bare = parse_date_fact({"date": "2024-05-03", "typeOfDay": ""})
    assert bare.type_of_day == TypeOfDay.UNSPECIFIED
    assert bare.available_sessions == frozenset({LeaveSession.NONE})


def test_cancelled_applications_do_not_consume_the_date():
    fact = parse_date_fact({
        "date": "2024-05-02",
        "typeOfDay": "W",
        "availableSessions": [1],
        "existingLeaveApplications": [
            {"leaveCode": "AL", "session": 1, "approvalStatus": "Cancelled"},
            {"leaveCode": "MC", "session": "First Half", "approvalStatus": "Pending"},
        ],
    })

    assert fact.existing_leave.leave_code == "MC"
    assert fact.existing_leave.session == LeaveSession.FIRST_HALF
    assert fact.existing_leave.approval_status == "Pending"


@pytest.mark.asyncio
async def test_list_for_range_queries_backend():
    client = AsyncMock()
    client.get.return_value = envelope([
        {"date": "2024-03-04", "typeOfDay": "W", "availableSessions": [1]},
        {"date": "2024-03-05", "typeOfDay": "R", "availableSessions": [0]},
    ])
    repo = DateFactRepository(client, "42")

    facts = await repo.list_for_range("AL", date(2024, 3, 4), date(2024, 3, 5))

    assert [f.type_of_day for f in facts] == [TypeOfDay.WORKING, TypeOfDay.REST_DAY]
    client.get.assert_awaited_once_with(
        "employees/42/leaves/dates",
        params={"LeaveCode": "AL", "DateFrom": "2024-03-04", "DateTo": "2024-03-05"},
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        envelope(None, success=False, message="Employee not found"),
        envelope([{"date": "2024-03-04", "typeOfDay": "X"}]),
        envelope([{"date": "2024-03-04", "availableSessions": [7]}]),
        envelope([{"typeOfDay": "W"}]),
    ],
)
async def test_bad_backend_data_is_unavailable(body):
    client = AsyncMock()
    client.get.return_value = body

    with pytest.raises(FactsUnavailableError):
        await DateFactRepository(client, "42").list_for_range("AL", date(2024, 3, 4), date(2024, 3, 4))


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()])
async def test_transport_failure_is_unavailable(error):
    client = AsyncMock()
    client.get.side_effect = error

    with pytest.raises(FactsUnavailableError) as exc_info:
        await DateFactRepository(client, "42").list_for_range("AL", date(2024, 3, 4), date(2024, 3, 4))

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_facts_outside_range_are_unavailable():
    client = AsyncMock()
    client.get.return_value = envelope([
        {"date": "2024-03-04", "typeOfDay": "W", "availableSessions": [1]},
        {"date": "2024-06-01", "typeOfDay": "W", "availableSessions": [1]},
    ])

    with pytest.raises(FactsUnavailableError) as exc_info:
        await DateFactRepository(client, "42").list_for_range("AL", date(2024, 3, 4), date(2024, 3, 4))

    assert exc_info.value.details["outside"] == ["2024-06-01"]


@pytest.mark.asyncio
async def test_undecodable_body_is_unavailable():
    client = AsyncMock()
    client.get.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")

    with pytest.raises(FactsUnavailableError):
        await LeavePolicyRepository(client, "42").get_policy("AL")


@pytest.mark.asyncio
async def test_get_policy_maps_backend_fields():
    client = AsyncMock()
    client.get.return_value = envelope({
        "leaveCode": "ML",
        "isConsecutive": True,
        "isAllowHalfDay": False,
        "isRequireAttachment": True,
        "isAllowBackdate": True,
        "maxDaysPerApplication": 60,
        "noticeDays": 14,
        "note": "Attach a medical certificate",
    })

    policy = await LeavePolicyRepository(client, "42").get_policy("ML")

    assert policy.requires_consecutive_days is True
    assert policy.requires_attachment is True
    assert policy.max_days_per_application == Decimal("60")
    assert policy.notice_lead_days == 14
    client.get.assert_awaited_once_with("employees/42/leaves/types/ML/policy", params=None)


@pytest.mark.asyncio
async def test_create_application():
    client = AsyncMock()
    client.post.return_value = envelope({"applicationId": 981})
    payload = SubmissionPayload(
        leave_type_id="AL",
        date_from=date(2024, 3, 4),
        date_to=date(2024, 3, 4),
        total_days=Decimal("0.5"),
        date_session_list=[DateSession(date=date(2024, 3, 4), session=LeaveSession.FIRST_HALF)],
    )

    application_id = await LeaveApplicationRepository(client, "42").create(payload)

    assert application_id == "981"
    sent = client.post.await_args.kwargs["json"]
    assert sent["leaveCode"] == "AL"
    assert sent["totalDay"] == 0.5


@pytest.mark.asyncio
async def test_refused_application_raises():
    client = AsyncMock()
    client.post.return_value = {"success": False, "message": "Insufficient balance", "errors": ["BALANCE"]}
    payload = SubmissionPayload(
        leave_type_id="AL",
        date_from=date(2024, 3, 4),
        date_to=date(2024, 3, 4),
        total_days=Decimal("1"),
        date_session_list=[DateSession(date=date(2024, 3, 4), session=LeaveSession.FULL_DAY)],
    )

    with pytest.raises(SubmissionFailedError) as exc_info:
        await LeaveApplicationRepository(client, "42").create(payload)

    assert exc_info.value.message == "Insufficient balance"
    assert exc_info.value.details["errors"] == ["BALANCE"]


@pytest.mark.asyncio
async def test_undecodable_submission_reply_fails_submission():
    client = AsyncMock()
    client.post.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    payload = SubmissionPayload(
        leave_type_id="AL",
        date_from=date(2024, 3, 4),
        date_to=date(2024, 3, 4),
        total_days=Decimal("1"),
        date_session_list=[DateSession(date=date(2024, 3, 4), session=LeaveSession.FULL_DAY)],
    )

    with pytest.raises(SubmissionFailedError) as exc_info:
        await LeaveApplicationRepository(client, "42").create(payload)

    assert exc_info.value.status_code == 502
