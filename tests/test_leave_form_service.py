"""
Leave form service tests: loading, superseded fetches and submission.
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

import pytest

from hrms_leave.core.exceptions import AppException, FactsUnavailableError, InvalidDateRangeError
from hrms_leave.schemas.leave_submission import RejectionCode
from hrms_leave.services.leave_form_service import LeaveFormService

MON = date(2024, 3, 4)
TUE = date(2024, 3, 5)
TODAY = date(2024, 3, 1)


@pytest.fixture
def form(form_repositories):
    fact_repo, policy_repo, application_repo = form_repositories
    return LeaveFormService(fact_repo, policy_repo, application_repo)


@pytest.mark.asyncio
async def test_load_builds_report(form, form_repositories, policy_factory, fact_factory):
    fact_repo, policy_repo, _ = form_repositories
    policy_repo.get_policy.return_value = policy_factory()
    fact_repo.list_for_range.return_value = [fact_factory(MON), fact_factory(TUE)]

    store = await form.load("AL", MON, TUE)

    assert store is form.store
    assert store.total_days == Decimal("2")
    fact_repo.list_for_range.assert_awaited_once_with("AL", MON, TUE)


@pytest.mark.asyncio
async def test_malformed_range_fails_before_fetching(form, form_repositories):
    fact_repo, policy_repo, _ = form_repositories

    with pytest.raises(InvalidDateRangeError):
        await form.load("AL", TUE, MON)
    with pytest.raises(InvalidDateRangeError):
        await form.load("AL", MON, MON + timedelta(days=400))

    policy_repo.get_policy.assert_not_awaited()
    fact_repo.list_for_range.assert_not_awaited()


@pytest.mark.asyncio
async def test_newer_load_supersedes_in_flight_load(form, form_repositories, policy_factory, fact_factory):
    fact_repo, policy_repo, _ = form_repositories
    release_first = asyncio.Event()

    async def get_policy(leave_type_id):
        return policy_factory(leave_type_id=leave_type_id, requires_consecutive_days=leave_type_id == "ML")

    async def list_for_range(leave_type_id, date_from, date_to):
        if leave_type_id == "AL":
            await release_first.wait()
        return [fact_factory(MON)]

    policy_repo.get_policy.side_effect = get_policy
    fact_repo.list_for_range.side_effect = list_for_range

    stale = asyncio.create_task(form.load("AL", MON, MON))
    await asyncio.sleep(0)
    current = await form.load("ML", MON, MON)
    release_first.set()

    assert await stale is None
    assert current is form.store
    assert form.policy.leave_type_id == "ML"


@pytest.mark.asyncio
async def test_cancel_discards_pending_load(form, form_repositories, policy_factory, fact_factory):
    fact_repo, policy_repo, _ = form_repositories
    release = asyncio.Event()

    async def list_for_range(*args):
        await release.wait()
        return [fact_factory(MON)]

    policy_repo.get_policy.return_value = policy_factory()
    fact_repo.list_for_range.side_effect = list_for_range

    pending = asyncio.create_task(form.load("AL", MON, MON))
    await asyncio.sleep(0)
    form.cancel()
    release.set()

    assert await pending is None
    assert form.store is None


@pytest.mark.asyncio
async def test_fetch_failure_is_transient_error(form, form_repositories, policy_factory):
    fact_repo, policy_repo, _ = form_repositories
    policy_repo.get_policy.return_value = policy_factory()
    fact_repo.list_for_range.side_effect = FactsUnavailableError("HR backend is unavailable")

    with pytest.raises(FactsUnavailableError) as exc_info:
        await form.load("AL", MON, TUE)

    assert exc_info.value.status_code == 503
    assert form.store is None


@pytest.mark.asyncio
async def test_submit_requires_loaded_report(form):
    with pytest.raises(AppException) as exc_info:
        await form.submit(today=TODAY)

    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_submit_sends_validated_payload(form, form_repositories, policy_factory, fact_factory):
    fact_repo, policy_repo, application_repo = form_repositories
    policy_repo.get_policy.return_value = policy_factory()
    fact_repo.list_for_range.return_value = [fact_factory(MON), fact_factory(TUE)]
    await form.load("AL", MON, TUE)

    result = await form.submit(reason="Rest", today=TODAY)

    assert result.accepted
    assert result.application_id == "APP-1"
    assert fact_repo.list_for_range.await_count == 2
    [payload] = application_repo.create.await_args.args
    assert payload.total_days == Decimal("2")
    assert payload.reason == "Rest"


@pytest.mark.asyncio
async def test_submit_rejects_date_taken_since_load(form, form_repositories, policy_factory, fact_factory):
    fact_repo, policy_repo, application_repo = form_repositories
    policy_repo.get_policy.return_value = policy_factory()
    fact_repo.list_for_range.side_effect = [
        [fact_factory(MON), fact_factory(TUE)],
        [fact_factory(MON), fact_factory(TUE, existing_leave_code="CL")],
    ]
    await form.load("AL", MON, TUE)

    result = await form.submit(today=TODAY)

    assert not result.accepted
    assert [r.code for r in result.rejections] == [RejectionCode.DUPLICATE_LEAVE_DETECTED]
    assert result.rejections[0].date == TUE
    application_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_fails_when_recheck_fetch_fails(form, form_repositories, policy_factory, fact_factory):
    fact_repo, policy_repo, application_repo = form_repositories
    policy_repo.get_policy.return_value = policy_factory()
    fact_repo.list_for_range.side_effect = [
        [fact_factory(MON)],
        FactsUnavailableError("HR backend is unavailable"),
    ]
    await form.load("AL", MON, MON)

    with pytest.raises(FactsUnavailableError):
        await form.submit(today=TODAY)

    application_repo.create.assert_not_awaited()
