"""
Leave eligibility controller.
Evaluates and validates selections built from caller-supplied facts.
"""

from datetime import date

from hrms_leave.controllers.base_controller import BaseController
from hrms_leave.core.config import settings
from hrms_leave.services.eligibility_service import EligibilityService
from hrms_leave.services.selection_store import SelectionStore
from hrms_leave.services.submission_service import SubmissionValidator
from hrms_leave.schemas.leave_eligibility import EligibilityReportResponse, EvaluateRequest
from hrms_leave.schemas.leave_submission import ValidateRequest, ValidationResponse
from hrms_leave.utils.date_range import check_facts_in_range, validate_date_range


class LeaveEligibilityController(BaseController):
    """Controller for stateless eligibility operations."""

    def __init__(
        self,
        eligibility_service: EligibilityService = None,
        validator: SubmissionValidator = None,
    ):
        self.eligibility_service = eligibility_service or EligibilityService()
        self.validator = validator or SubmissionValidator()

    def _build_store(self, request: EvaluateRequest) -> SelectionStore:
        validate_date_range(request.date_from, request.date_to, settings.MAX_RANGE_DAYS)
        check_facts_in_range(request.facts, request.date_from, request.date_to)
        verdicts = self.eligibility_service.evaluate(request.policy, request.facts)
        store = SelectionStore(
            request.policy,
            request.date_from,
            request.date_to,
            request.facts,
            verdicts,
        )
        store.apply_overrides(request.overrides)
        return store

    def evaluate(self, request: EvaluateRequest) -> EligibilityReportResponse:
        """Build a report and replay the overrides on top of it."""
        return self._build_store(request).to_response()

    def validate(self, request: ValidateRequest) -> ValidationResponse:
        """Validate the resulting selection; the supplied facts count as the latest ones."""
        store = self._build_store(request)
        result = self.validator.validate(
            request.policy,
            store,
            request.today or date.today(),
            reason=request.reason,
            attachments=request.attachments,
        )
        return ValidationResponse(
            accepted=result.accepted,
            payload=result.payload,
            rejections=result.rejections,
        )
