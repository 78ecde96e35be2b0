"""
Leave submission Pydantic schemas for validation results and payloads.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
import datetime
from datetime import date
from decimal import Decimal
from enum import Enum

from hrms_leave.schemas.date_fact import LeaveSession
from hrms_leave.schemas.leave_eligibility import EvaluateRequest, SelectionOverride


class RejectionCode(str, Enum):
    """Policy violations reported by the submission validator."""
    EMPTY_SELECTION = "EMPTY_SELECTION"
    INVALID_RANGE = "INVALID_RANGE"
    NOTICE_POLICY_VIOLATION = "NOTICE_POLICY_VIOLATION"
    BACKDATE_NOT_ALLOWED = "BACKDATE_NOT_ALLOWED"
    EXCEEDS_MAX_DAYS = "EXCEEDS_MAX_DAYS"
    DUPLICATE_LEAVE_DETECTED = "DUPLICATE_LEAVE_DETECTED"
    ATTACHMENT_REQUIRED = "ATTACHMENT_REQUIRED"


class RejectionReason(BaseModel):
    """One policy violation. Only the fields relevant to the code are set."""
    code: RejectionCode
    message: str
    date: Optional[datetime.date] = None
    conflicting_leave_code: Optional[str] = None
    required_days: Optional[int] = None
    max_days: Optional[Decimal] = None


class DateSession(BaseModel):
    """Session taken on one included date."""
    date: date
    session: LeaveSession

    @property
    def session_id(self) -> int:
        return self.session.session_id


class SubmissionPayload(BaseModel):
    """Validated leave application, ready for the HR backend."""
    leave_type_id: str
    date_from: date
    date_to: date
    total_days: Decimal
    reason: str = ""
    date_session_list: List[DateSession]
    attachments: List[str] = []

    def to_backend(self) -> Dict[str, Any]:
        """Serialize into the HR backend's leave application shape."""
        return {
            "leaveCode": self.leave_type_id,
            "dateFrom": self.date_from.isoformat(),
            "dateTo": self.date_to.isoformat(),
            "totalDay": float(self.total_days),
            "reason": self.reason,
            "leaveDateList": [
                {
                    "date": item.date.isoformat(),
                    "sessionId": item.session_id,
                }
                for item in self.date_session_list
            ],
            "attachmentList": list(self.attachments),
        }


class SubmissionResult(BaseModel):
    """Outcome of a validation run: a payload or every violation found."""
    payload: Optional[SubmissionPayload] = None
    rejections: List[RejectionReason] = []
    application_id: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.payload is not None and not self.rejections


class ValidateRequest(EvaluateRequest):
    """Schema for validating a selection built from caller-supplied facts."""
    reason: str = Field("", max_length=2000)
    attachments: List[str] = []
    today: Optional[date] = None


class ValidationResponse(BaseModel):
    """Schema for a validation response."""
    accepted: bool
    payload: Optional[SubmissionPayload] = None
    rejections: List[RejectionReason] = []


class LeaveApplicationCreate(BaseModel):
    """Schema for submitting a leave application through the HR backend."""
    leave_type_id: str = Field(..., min_length=1, max_length=50)
    date_from: date
    date_to: date
    overrides: List[SelectionOverride] = []
    # Selection the user confirmed; re-checked against the latest facts
    date_session_list: List[DateSession] = []
    reason: str = Field("", max_length=2000)
    attachments: List[str] = []


class LeaveApplicationResponse(BaseModel):
    """Schema for a submitted leave application."""
    application_id: Optional[str] = None
    payload: SubmissionPayload
