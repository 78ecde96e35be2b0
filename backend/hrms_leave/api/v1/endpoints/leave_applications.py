"""
Leave application API endpoints backed by the HR backend.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, HTTPException, status
from fastapi.responses import JSONResponse

from hrms_leave.api.v1.middleware import require_bearer_token
from hrms_leave.deps.di_container import get_container, build_leave_application_controller
from hrms_leave.schemas.leave_eligibility import EligibilityReportResponse
from hrms_leave.schemas.leave_submission import (
    LeaveApplicationCreate,
    LeaveApplicationResponse,
    ValidationResponse,
)

router = APIRouter()


@router.get("/{employee_id}/leave-eligibility", response_model=EligibilityReportResponse)
async def get_leave_eligibility(
    employee_id: str,
    leave_type_id: str = Query(..., min_length=1),
    date_from: date = Query(...),
    date_to: date = Query(...),
    token: str = Depends(require_bearer_token),
) -> EligibilityReportResponse:
    """Fetch policy and date facts and return the default report."""
    controller = build_leave_application_controller(get_container(), employee_id, token)
    try:
        report = await controller.get_eligibility(leave_type_id, date_from, date_to)
    finally:
        await controller.close()
    # Each request owns its form service, so supersession only happens for
    # callers that share one; the Optional result is still honoured here.
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Eligibility request was superseded",
        )
    return report


@router.post(
    "/{employee_id}/leave-applications",
    response_model=LeaveApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ValidationResponse}},
)
async def create_leave_application(
    employee_id: str,
    application: LeaveApplicationCreate,
    token: str = Depends(require_bearer_token),
):
    """Validate and submit a leave application; rejections return 422."""
    controller = build_leave_application_controller(get_container(), employee_id, token)
    try:
        result = await controller.submit(application)
    finally:
        await controller.close()
    # Superseded loads cannot occur per request; see get_leave_eligibility
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Leave application request was superseded",
        )
    if not result.accepted:
        rejected = ValidationResponse(accepted=False, rejections=result.rejections)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=rejected.model_dump(mode="json"),
        )
    return LeaveApplicationResponse(
        application_id=result.application_id,
        payload=result.payload,
    )
