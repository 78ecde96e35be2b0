"""
Leave form service.
Owns the eligibility report of one leave form: loads policy and date facts,
keeps only the newest load, and re-checks facts when submitting.
"""

from datetime import date
from typing import Iterable, Optional

from hrms_leave.core.config import settings
from hrms_leave.core.exceptions import AppException, FactsUnavailableError
from hrms_leave.core.logging import get_logger
from hrms_leave.repositories.date_fact_repository import DateFactRepository
from hrms_leave.repositories.leave_application_repository import LeaveApplicationRepository
from hrms_leave.repositories.leave_policy_repository import LeavePolicyRepository
from hrms_leave.services.base_service import BaseService
from hrms_leave.services.eligibility_service import EligibilityService
from hrms_leave.services.selection_store import SelectionStore
from hrms_leave.services.submission_service import SubmissionValidator
from hrms_leave.schemas.leave_policy import PolicyDescriptor
from hrms_leave.schemas.leave_submission import SubmissionResult
from hrms_leave.utils.date_range import validate_date_range

logger = get_logger(__name__)


class LeaveFormService(BaseService):
    """Service for one employee's leave application form."""

    def __init__(
        self,
        fact_repo: DateFactRepository,
        policy_repo: LeavePolicyRepository,
        application_repo: LeaveApplicationRepository,
        eligibility_service: Optional[EligibilityService] = None,
        validator: Optional[SubmissionValidator] = None,
        max_range_days: int = settings.MAX_RANGE_DAYS,
    ):
        self.fact_repo = fact_repo
        self.policy_repo = policy_repo
        self.application_repo = application_repo
        self.eligibility_service = eligibility_service or EligibilityService()
        self.validator = validator or SubmissionValidator()
        self.max_range_days = max_range_days
        self.policy: Optional[PolicyDescriptor] = None
        self.store: Optional[SelectionStore] = None
        # Bumped on every load or cancel; a load whose number is stale is discarded
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def cancel(self) -> None:
        """Drop interest in any in-flight load."""
        self._generation += 1

    async def load(
        self,
        leave_type_id: str,
        date_from: date,
        date_to: date,
    ) -> Optional[SelectionStore]:
        """
        Fetch policy and facts for a (leave type, range) pair and rebuild the report.

        Returns:
            The new report, or None when a newer load or a cancel superseded this one

        Raises:
            InvalidDateRangeError: If the range is malformed
            FactsUnavailableError: If the fetch fails and this load is still current
        """
        validate_date_range(date_from, date_to, self.max_range_days)
        self._generation += 1
        generation = self._generation
        # The previous report belongs to another (policy, range) pair
        self.policy = None
        self.store = None

        try:
            policy = await self.policy_repo.get_policy(leave_type_id)
            facts = await self.fact_repo.list_for_range(leave_type_id, date_from, date_to)
        except FactsUnavailableError:
            if generation != self._generation:
                logger.info(
                    "Ignoring failure of superseded load",
                    extra={"leave_type_id": leave_type_id, "generation": generation},
                )
                return None
            raise

        if generation != self._generation:
            logger.info(
                "Discarding superseded load",
                extra={"leave_type_id": leave_type_id, "generation": generation},
            )
            return None

        verdicts = self.eligibility_service.evaluate(policy, facts)
        self.policy = policy
        self.store = SelectionStore(policy, date_from, date_to, facts, verdicts)
        logger.info(
            "Eligibility report built",
            extra={
                "leave_type_id": leave_type_id,
                "date_from": date_from.isoformat(),
                "date_to": date_to.isoformat(),
                "total_days": str(self.store.total_days),
            },
        )
        return self.store

    async def submit(
        self,
        reason: str = "",
        attachments: Iterable[str] = (),
        today: Optional[date] = None,
        expected_dates: Iterable[date] = (),
    ) -> SubmissionResult:
        """
        Re-check the current selection against fresh facts and submit it.

        Args:
            reason: Free-text reason entered by the user
            attachments: Opaque attachment references
            today: Submission date, defaults to today
            expected_dates: Dates the user saw as selected; any of them taken
                by another application rejects the whole submission

        Returns:
            SubmissionResult; rejected results are never sent to the HR backend

        Raises:
            FactsUnavailableError: If the re-check fetch fails (retryable)
            SubmissionFailedError: If the HR backend refuses the application
        """
        policy, store = self.policy, self.store
        if policy is None or store is None:
            raise AppException("No eligibility report is loaded", status_code=409)

        latest = await self.fact_repo.list_for_range(
            policy.leave_type_id, store.date_from, store.date_to
        )
        result = self.validator.validate(
            policy,
            store,
            today or date.today(),
            latest_facts={fact.date: fact for fact in latest},
            reason=reason,
            attachments=attachments,
            expected_dates=expected_dates,
        )
        if not result.accepted:
            logger.info(
                "Leave application rejected",
                extra={
                    "leave_type_id": policy.leave_type_id,
                    "rejections": [r.code.value for r in result.rejections],
                },
            )
            return result

        application_id = await self.application_repo.create(result.payload)
        return result.model_copy(update={"application_id": application_id})
