"""
Eligibility evaluation.

Each date of a candidate range is judged by an ordered list of rules; the
first rule that returns a verdict wins:

1. the date offers no usable session;
2. another leave application already consumes the date;
3. the leave type requires consecutive days (special days stay selectable);
4. day-by-day leave types (special days are excluded by default).

Evaluation is pure: identical (policy, facts) always give identical verdicts.
"""

from typing import Callable, List, Optional, Sequence

from hrms_leave.services.base_service import BaseService
from hrms_leave.schemas.date_fact import (
    DateFact,
    LeaveSession,
    HALF_DAY_SESSIONS,
    SPECIAL_DAY_TYPES,
)
from hrms_leave.schemas.leave_policy import PolicyDescriptor
from hrms_leave.schemas.leave_eligibility import DateVerdict, ExclusionReason


EligibilityRule = Callable[[PolicyDescriptor, DateFact], Optional[DateVerdict]]


def _excluded(fact: DateFact, reason: ExclusionReason, sessions=()) -> DateVerdict:
    return DateVerdict(
        date=fact.date,
        default_excluded=True,
        reason=reason,
        eligible_sessions=tuple(sessions),
    )


def _permitted_sessions(policy: PolicyDescriptor, fact: DateFact) -> tuple:
    """Offered sessions, with half days dropped when the policy forbids them."""
    offered = fact.offered_sessions
    if policy.allows_half_day:
        return offered
    return tuple(s for s in offered if s not in HALF_DAY_SESSIONS)


def no_session_offered_rule(policy: PolicyDescriptor, fact: DateFact) -> Optional[DateVerdict]:
    if not fact.offered_sessions:
        return _excluded(fact, ExclusionReason.NO_SESSION_OFFERED)
    return None


def existing_leave_rule(policy: PolicyDescriptor, fact: DateFact) -> Optional[DateVerdict]:
    if fact.existing_leave is not None:
        return _excluded(fact, ExclusionReason.HAS_EXISTING_LEAVE)
    return None


def consecutive_days_rule(policy: PolicyDescriptor, fact: DateFact) -> Optional[DateVerdict]:
    if not policy.requires_consecutive_days:
        return None
    sessions = [LeaveSession.FULL_DAY]
    if policy.allows_half_day:
        sessions.extend(s for s in fact.offered_sessions if s in HALF_DAY_SESSIONS)
    return DateVerdict(
        date=fact.date,
        default_excluded=False,
        reason=ExclusionReason.NONE,
        eligible_sessions=tuple(sessions),
    )


def day_by_day_rule(policy: PolicyDescriptor, fact: DateFact) -> Optional[DateVerdict]:
    sessions = _permitted_sessions(policy, fact)
    if fact.type_of_day in SPECIAL_DAY_TYPES:
        # Still selectable by hand, just never picked automatically
        return _excluded(fact, ExclusionReason.SPECIAL_DAY, sessions)
    if not sessions:
        return _excluded(fact, ExclusionReason.NO_SESSION_OFFERED)
    return DateVerdict(
        date=fact.date,
        default_excluded=False,
        reason=ExclusionReason.NONE,
        eligible_sessions=sessions,
    )


ELIGIBILITY_RULES: Sequence[EligibilityRule] = (
    no_session_offered_rule,
    existing_leave_rule,
    consecutive_days_rule,
    day_by_day_rule,
)


def evaluate_date(policy: PolicyDescriptor, fact: DateFact) -> DateVerdict:
    """Apply the rules in precedence order and return the first verdict."""
    for rule in ELIGIBILITY_RULES:
        verdict = rule(policy, fact)
        if verdict is not None:
            return verdict
    raise AssertionError("day_by_day_rule always yields a verdict")


def evaluate(policy: PolicyDescriptor, facts: Sequence[DateFact]) -> List[DateVerdict]:
    """One verdict per fact, in input order."""
    return [evaluate_date(policy, fact) for fact in facts]


class EligibilityService(BaseService):
    """Service wrapping the eligibility rules."""

    def evaluate(self, policy: PolicyDescriptor, facts: Sequence[DateFact]) -> List[DateVerdict]:
        """
        Evaluate every date of a range against a leave policy.

        Args:
            policy: Leave type policy
            facts: Date facts for the range

        Returns:
            Verdicts in the same order as ``facts``
        """
        return evaluate(policy, facts)
