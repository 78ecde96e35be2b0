"""
Leave application controller.
Runs the leave form flow against the HR backend for one employee.
"""

from datetime import date
from typing import Optional

from hrms_leave.controllers.base_controller import BaseController
from hrms_leave.core.integrations.http.http_client import HttpClient
from hrms_leave.services.leave_form_service import LeaveFormService
from hrms_leave.schemas.leave_eligibility import EligibilityReportResponse, ExclusionReason
from hrms_leave.schemas.leave_submission import LeaveApplicationCreate, SubmissionResult


class LeaveApplicationController(BaseController):
    """Controller for backend-backed leave applications."""

    def __init__(self, form_service: LeaveFormService, client: Optional[HttpClient] = None):
        self.form_service = form_service
        self.client = client

    async def close(self) -> None:
        """Release the HR backend connection."""
        if self.client is not None:
            await self.client.close()

    async def get_eligibility(
        self,
        leave_type_id: str,
        date_from: date,
        date_to: date,
    ) -> Optional[EligibilityReportResponse]:
        """Load the default report for a leave type and range."""
        store = await self.form_service.load(leave_type_id, date_from, date_to)
        if store is None:
            return None
        return store.to_response()

    async def submit(
        self,
        application: LeaveApplicationCreate,
        today: Optional[date] = None,
    ) -> Optional[SubmissionResult]:
        """
        Load, replay the user's overrides, re-check and submit.

        Dates the user expected to take (the submitted date-session list and
        any override that includes a date) are checked against the fresh facts,
        so a date another application took meanwhile rejects the submission.
        """
        store = await self.form_service.load(
            application.leave_type_id,
            application.date_from,
            application.date_to,
        )
        if store is None:
            return None
        expected = {item.date for item in application.date_session_list}
        expected.update(o.date for o in application.overrides if o.included)
        taken = {
            day for day in expected
            if store.verdict(day).reason == ExclusionReason.HAS_EXISTING_LEAVE
        }
        # Taken dates cannot be included; the validator reports them instead
        store.apply_overrides(o for o in application.overrides if o.date not in taken)
        return await self.form_service.submit(
            reason=application.reason,
            attachments=application.attachments,
            today=today,
            expected_dates=sorted(expected),
        )
