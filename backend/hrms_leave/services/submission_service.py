"""
Submission validation.
Every check runs so that all violations can be shown to the user at once.
"""

from datetime import date
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from hrms_leave.core.exceptions import FactsUnavailableError
from hrms_leave.services.base_service import BaseService
from hrms_leave.services.selection_store import SelectionStore
from hrms_leave.schemas.date_fact import DateFact
from hrms_leave.schemas.leave_policy import PolicyDescriptor
from hrms_leave.schemas.leave_submission import (
    DateSession,
    RejectionCode,
    RejectionReason,
    SubmissionPayload,
    SubmissionResult,
)


SubmissionCheck = Callable[
    [PolicyDescriptor, SelectionStore, date, Mapping[date, DateFact], Sequence[str]],
    List[RejectionReason],
]


def check_non_empty_selection(
    policy: PolicyDescriptor,
    store: SelectionStore,
    today: date,
    latest_facts: Mapping[date, DateFact],
    attachments: Sequence[str],
) -> List[RejectionReason]:
    if store.included_entries():
        return []
    return [RejectionReason(
        code=RejectionCode.EMPTY_SELECTION,
        message="Select at least one date",
    )]


def check_range(
    policy: PolicyDescriptor,
    store: SelectionStore,
    today: date,
    latest_facts: Mapping[date, DateFact],
    attachments: Sequence[str],
) -> List[RejectionReason]:
    if store.date_to >= store.date_from:
        return []
    return [RejectionReason(
        code=RejectionCode.INVALID_RANGE,
        message="End date must not be before the start date",
    )]


def check_notice_period(
    policy: PolicyDescriptor,
    store: SelectionStore,
    today: date,
    latest_facts: Mapping[date, DateFact],
    attachments: Sequence[str],
) -> List[RejectionReason]:
    """Backdated ranges need backdate permission; others need enough lead days."""
    lead_days = (store.date_from - today).days
    if lead_days < 0:
        if policy.allows_backdate:
            return []
        return [RejectionReason(
            code=RejectionCode.BACKDATE_NOT_ALLOWED,
            message="This leave type cannot be applied for past dates",
        )]
    if policy.notice_lead_days > 0 and lead_days < policy.notice_lead_days:
        return [RejectionReason(
            code=RejectionCode.NOTICE_POLICY_VIOLATION,
            message=f"This leave type must be applied at least {policy.notice_lead_days} days in advance",
            required_days=policy.notice_lead_days,
        )]
    return []


def check_max_days(
    policy: PolicyDescriptor,
    store: SelectionStore,
    today: date,
    latest_facts: Mapping[date, DateFact],
    attachments: Sequence[str],
) -> List[RejectionReason]:
    limit = policy.max_days_per_application
    if limit is None or store.total_days <= limit:
        return []
    return [RejectionReason(
        code=RejectionCode.EXCEEDS_MAX_DAYS,
        message=f"At most {limit} days can be applied in one application",
        max_days=limit,
    )]


def find_duplicate_leave(
    dates: Iterable[date],
    latest_facts: Mapping[date, DateFact],
) -> List[RejectionReason]:
    """One DUPLICATE_LEAVE_DETECTED per date that another application now holds."""
    rejections = []
    for day in dates:
        fact = latest_facts.get(day)
        if fact is None:
            raise FactsUnavailableError(
                "Latest date facts are incomplete",
                details={"missing_date": day.isoformat()},
            )
        if fact.existing_leave is not None:
            rejections.append(RejectionReason(
                code=RejectionCode.DUPLICATE_LEAVE_DETECTED,
                message=f"{day.isoformat()} already has a {fact.existing_leave.leave_code} application",
                date=day,
                conflicting_leave_code=fact.existing_leave.leave_code,
            ))
    return rejections


def check_duplicate_leave(
    policy: PolicyDescriptor,
    store: SelectionStore,
    today: date,
    latest_facts: Mapping[date, DateFact],
    attachments: Sequence[str],
) -> List[RejectionReason]:
    """Reject when a selected date picked up another leave since it was evaluated."""
    return find_duplicate_leave([entry.date for entry in store.included_entries()], latest_facts)


def check_attachment(
    policy: PolicyDescriptor,
    store: SelectionStore,
    today: date,
    latest_facts: Mapping[date, DateFact],
    attachments: Sequence[str],
) -> List[RejectionReason]:
    if not policy.requires_attachment or attachments:
        return []
    return [RejectionReason(
        code=RejectionCode.ATTACHMENT_REQUIRED,
        message="This leave type requires a supporting attachment",
    )]


SUBMISSION_CHECKS: Sequence[SubmissionCheck] = (
    check_non_empty_selection,
    check_range,
    check_notice_period,
    check_max_days,
    check_duplicate_leave,
    check_attachment,
)


class SubmissionValidator(BaseService):
    """Service running the pre-submit checks and building the payload."""

    def validate(
        self,
        policy: PolicyDescriptor,
        store: SelectionStore,
        today: date,
        latest_facts: Optional[Mapping[date, DateFact]] = None,
        reason: str = "",
        attachments: Iterable[str] = (),
        expected_dates: Iterable[date] = (),
    ) -> SubmissionResult:
        """
        Validate a selection for submission.

        Args:
            policy: Policy the selection was evaluated under
            store: Current selection
            today: Submission date
            latest_facts: Freshly fetched facts keyed by date; defaults to the
                facts the selection was built from
            reason: Free-text reason entered by the user
            attachments: Opaque attachment references
            expected_dates: Dates the user saw as selected. Those no longer
                included are still checked for another leave, so a date taken
                since the user's view rejects the submission instead of
                dropping out of the payload.

        Returns:
            SubmissionResult with either a payload or every rejection found

        Raises:
            ValueError: If the selection was built for another leave type
            DateNotInRangeError: If an expected date is not part of the selection
            FactsUnavailableError: If latest_facts lacks a checked date
        """
        if store.policy.leave_type_id != policy.leave_type_id:
            raise ValueError(
                f"Selection belongs to leave type {store.policy.leave_type_id}, not {policy.leave_type_id}"
            )
        if latest_facts is None:
            latest_facts = store.facts
        attachments = list(attachments)
        dropped = sorted({
            day for day in expected_dates if not store.entry(day).included
        })

        rejections: List[RejectionReason] = []
        for check in SUBMISSION_CHECKS:
            rejections.extend(check(policy, store, today, latest_facts, attachments))
        rejections.extend(find_duplicate_leave(dropped, latest_facts))

        if rejections:
            return SubmissionResult(rejections=rejections)

        payload = SubmissionPayload(
            leave_type_id=policy.leave_type_id,
            date_from=store.date_from,
            date_to=store.date_to,
            total_days=store.total_days,
            reason=reason,
            date_session_list=[
                DateSession(date=entry.date, session=entry.session)
                for entry in sorted(store.included_entries(), key=lambda e: e.date)
            ],
            attachments=attachments,
        )
        return SubmissionResult(payload=payload)
