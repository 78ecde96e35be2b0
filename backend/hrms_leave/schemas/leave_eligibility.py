"""
Leave eligibility Pydantic schemas for verdicts, selections and reports.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Tuple
from datetime import date
from decimal import Decimal
from enum import Enum

from hrms_leave.schemas.date_fact import DateFact, LeaveSession, TypeOfDay
from hrms_leave.schemas.leave_policy import PolicyDescriptor
from hrms_leave.utils.day_count import day_weight


class ExclusionReason(str, Enum):
    """Why a date is excluded by default."""
    HAS_EXISTING_LEAVE = "HAS_EXISTING_LEAVE"
    SPECIAL_DAY = "SPECIAL_DAY"
    NO_SESSION_OFFERED = "NO_SESSION_OFFERED"
    NONE = "NONE"


class DateVerdict(BaseModel):
    """Evaluator output for one date. Never edited by the user."""
    date: date
    default_excluded: bool
    reason: ExclusionReason = ExclusionReason.NONE
    eligible_sessions: Tuple[LeaveSession, ...] = ()

    class Config:
        frozen = True

    @property
    def default_session(self) -> Optional[LeaveSession]:
        """FULL_DAY when eligible, otherwise the first eligible session."""
        if LeaveSession.FULL_DAY in self.eligible_sessions:
            return LeaveSession.FULL_DAY
        return self.eligible_sessions[0] if self.eligible_sessions else None

    def day_weight(self, session: Optional[LeaveSession]) -> Decimal:
        return day_weight(session)


class SelectionEntry(BaseModel):
    """User-controlled selection state for one date."""
    date: date
    included: bool
    session: Optional[LeaveSession] = None


class SelectionOverride(BaseModel):
    """A manual change the user made on top of the defaults."""
    date: date
    included: Optional[bool] = None
    session: Optional[LeaveSession] = None


class EligibilityRow(BaseModel):
    """One date of an eligibility report."""
    date: date
    type_of_day: TypeOfDay
    holiday_name: Optional[str] = None
    verdict: DateVerdict
    selection: SelectionEntry
    day_weight: Decimal


class EligibilityReportResponse(BaseModel):
    """Schema for an eligibility report."""
    leave_type_id: str
    date_from: date
    date_to: date
    total_days: Decimal
    note: str = ""
    rows: List[EligibilityRow]


class EvaluateRequest(BaseModel):
    """Schema for evaluating a range from caller-supplied facts."""
    policy: PolicyDescriptor
    date_from: date
    date_to: date
    facts: List[DateFact] = Field(..., min_length=1)
    overrides: List[SelectionOverride] = []
