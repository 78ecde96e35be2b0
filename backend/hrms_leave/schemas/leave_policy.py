"""
Leave policy Pydantic schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal


class PolicyDescriptor(BaseModel):
    """
    Policy of one leave type, supplied by the HR backend.
    Immutable for the duration of an evaluation.
    """
    leave_type_id: str = Field(..., min_length=1, max_length=50)
    requires_consecutive_days: bool = False
    allows_half_day: bool = False
    requires_attachment: bool = False
    allows_backdate: bool = False
    max_days_per_application: Optional[Decimal] = Field(None, gt=0)
    notice_lead_days: int = Field(0, ge=0)
    note: str = ""

    class Config:
        frozen = True
