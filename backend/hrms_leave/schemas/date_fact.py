"""
Date fact Pydantic schemas.
A date fact is the HR backend's read-only view of one calendar date:
its type of day, the sessions it offers and any leave already on it.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Any, FrozenSet, Optional, Union
from datetime import date
from enum import Enum


class TypeOfDay(str, Enum):
    """Type of day values."""
    WORKING = "WORKING"
    REST_DAY = "REST_DAY"
    OFF_DAY = "OFF_DAY"
    PUBLIC_HOLIDAY = "PUBLIC_HOLIDAY"
    UNSPECIFIED = "UNSPECIFIED"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "TypeOfDay":
        """Map a duty roster code (W/R/O/P) or a value name to a type of day."""
        if not code:
            return cls.UNSPECIFIED
        normalized = str(code).strip().upper()
        if normalized in _TYPE_OF_DAY_CODES:
            return _TYPE_OF_DAY_CODES[normalized]
        return cls(normalized)


_TYPE_OF_DAY_CODES = {
    "W": TypeOfDay.WORKING,
    "R": TypeOfDay.REST_DAY,
    "O": TypeOfDay.OFF_DAY,
    "P": TypeOfDay.PUBLIC_HOLIDAY,
}

SPECIAL_DAY_TYPES = frozenset({
    TypeOfDay.REST_DAY,
    TypeOfDay.OFF_DAY,
    TypeOfDay.PUBLIC_HOLIDAY,
})


class LeaveSession(str, Enum):
    """Portion of a day a leave consumes."""
    NONE = "NONE"
    FULL_DAY = "FULL_DAY"
    FIRST_HALF = "FIRST_HALF"
    SECOND_HALF = "SECOND_HALF"

    @property
    def session_id(self) -> int:
        """Numeric session code used by the HR backend."""
        return _SESSION_IDS[self]

    @classmethod
    def from_code(cls, code: Union[int, str, None]) -> "LeaveSession":
        """Map a backend session code (0-3 or a name such as "Full Day") to a session."""
        if code is None:
            return cls.NONE
        if isinstance(code, int) or (isinstance(code, str) and code.strip().isdigit()):
            session = _SESSIONS_BY_ID.get(int(code))
            if session is None:
                raise ValueError(f"Unknown session code: {code!r}")
            return session
        key = code.replace(" ", "").replace("_", "").lower()
        if key in _SESSION_NAMES:
            return _SESSION_NAMES[key]
        raise ValueError(f"Unknown session code: {code!r}")


_SESSION_IDS = {
    LeaveSession.NONE: 0,
    LeaveSession.FULL_DAY: 1,
    LeaveSession.FIRST_HALF: 2,
    LeaveSession.SECOND_HALF: 3,
}
_SESSIONS_BY_ID = {session_id: session for session, session_id in _SESSION_IDS.items()}
_SESSION_NAMES = {
    "none": LeaveSession.NONE,
    "nosession": LeaveSession.NONE,
    "fullday": LeaveSession.FULL_DAY,
    "firsthalf": LeaveSession.FIRST_HALF,
    "secondhalf": LeaveSession.SECOND_HALF,
}

# Canonical order used wherever sessions are listed
SELECTABLE_SESSIONS = (
    LeaveSession.FULL_DAY,
    LeaveSession.FIRST_HALF,
    LeaveSession.SECOND_HALF,
)
HALF_DAY_SESSIONS = frozenset({LeaveSession.FIRST_HALF, LeaveSession.SECOND_HALF})


class ExistingLeave(BaseModel):
    """A leave application that already consumes the date."""
    leave_code: str = Field(..., min_length=1)
    session: Optional[LeaveSession] = None
    approval_status: Optional[str] = None

    class Config:
        frozen = True


class DateFact(BaseModel):
    """Backend-observed facts for one calendar date."""
    date: date
    type_of_day: TypeOfDay = TypeOfDay.UNSPECIFIED
    holiday_name: Optional[str] = Field(None, max_length=255)
    available_sessions: FrozenSet[LeaveSession] = frozenset({LeaveSession.NONE})
    existing_leave: Optional[ExistingLeave] = None

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _drop_holiday_name_on_regular_days(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("holiday_name"):
            type_of_day = data.get("type_of_day")
            if type_of_day not in (TypeOfDay.PUBLIC_HOLIDAY, TypeOfDay.PUBLIC_HOLIDAY.value):
                data = {**data, "holiday_name": None}
        return data

    @property
    def offered_sessions(self) -> tuple:
        """Usable sessions in canonical order (NONE never counts)."""
        return tuple(s for s in SELECTABLE_SESSIONS if s in self.available_sessions)
