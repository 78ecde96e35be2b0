"""
Leave eligibility API endpoints.
Stateless: the caller supplies policy and date facts.
"""

from fastapi import APIRouter

from hrms_leave.deps.di_container import get_container
from hrms_leave.schemas.leave_eligibility import EligibilityReportResponse, EvaluateRequest
from hrms_leave.schemas.leave_submission import ValidateRequest, ValidationResponse

router = APIRouter()


@router.post("/evaluate", response_model=EligibilityReportResponse)
async def evaluate_leave_eligibility(
    request: EvaluateRequest,
) -> EligibilityReportResponse:
    """Evaluate a date range and return the per-date report."""
    controller = get_container().leave_eligibility_controller()
    return controller.evaluate(request)


@router.post("/validate", response_model=ValidationResponse)
async def validate_leave_selection(
    request: ValidateRequest,
) -> ValidationResponse:
    """Validate a selection; rejections are returned, not raised."""
    controller = get_container().leave_eligibility_controller()
    return controller.validate(request)
