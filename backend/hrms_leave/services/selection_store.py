"""
Selection store.
Holds the user's per-date choices layered over the evaluator's defaults for
one (policy, date range) pair. This is the mutable eligibility report.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from hrms_leave.core.exceptions import DateNotInRangeError, InvalidSessionError
from hrms_leave.schemas.date_fact import DateFact, LeaveSession
from hrms_leave.schemas.leave_policy import PolicyDescriptor
from hrms_leave.schemas.leave_eligibility import (
    DateVerdict,
    EligibilityReportResponse,
    EligibilityRow,
    SelectionEntry,
    SelectionOverride,
)
from hrms_leave.utils.day_count import calculate_total_days, day_weight


class SelectionStore:
    """Per-date selection state for one eligibility report."""

    def __init__(
        self,
        policy: PolicyDescriptor,
        date_from: date,
        date_to: date,
        facts: Sequence[DateFact],
        verdicts: Sequence[DateVerdict],
    ):
        self.policy = policy
        self.date_from = date_from
        self.date_to = date_to
        self._facts: Dict[date, DateFact] = {}
        self._verdicts: Dict[date, DateVerdict] = {}
        self._entries: Dict[date, SelectionEntry] = {}
        self.rebuild_from_verdicts(facts, verdicts)

    @property
    def dates(self) -> List[date]:
        return list(self._entries)

    @property
    def facts(self) -> Dict[date, DateFact]:
        return dict(self._facts)

    def rows(self) -> List[Tuple[DateFact, DateVerdict, SelectionEntry]]:
        """Ordered (fact, verdict, entry) rows, ascending by date."""
        return [(self._facts[d], self._verdicts[d], self._entries[d]) for d in self._entries]

    def entry(self, day: date) -> SelectionEntry:
        self._require_date(day)
        return self._entries[day]

    def verdict(self, day: date) -> DateVerdict:
        self._require_date(day)
        return self._verdicts[day]

    def included_entries(self) -> List[SelectionEntry]:
        return [entry for entry in self._entries.values() if entry.included]

    @property
    def total_days(self) -> Decimal:
        return calculate_total_days(self._entries.values())

    def rebuild_from_verdicts(
        self,
        facts: Sequence[DateFact],
        verdicts: Sequence[DateVerdict],
    ) -> None:
        """
        Reset every entry to its verdict default, dropping manual overrides.

        Raises:
            ValueError: If facts and verdicts do not line up one-to-one, or a
                date falls outside [date_from, date_to]
        """
        if len(facts) != len(verdicts):
            raise ValueError(
                f"Got {len(verdicts)} verdicts for {len(facts)} date facts"
            )
        pairs = sorted(zip(facts, verdicts), key=lambda pair: pair[0].date)
        seen = set()
        for fact, verdict in pairs:
            if fact.date != verdict.date:
                raise ValueError(f"Verdict for {verdict.date} paired with fact for {fact.date}")
            if not self.date_from <= fact.date <= self.date_to:
                raise ValueError(
                    f"Date fact for {fact.date} is outside {self.date_from}..{self.date_to}"
                )
            if fact.date in seen:
                raise ValueError(f"Duplicate date fact for {fact.date}")
            seen.add(fact.date)

        self._facts = {fact.date: fact for fact, _ in pairs}
        self._verdicts = {verdict.date: verdict for _, verdict in pairs}
        self._entries = {
            verdict.date: SelectionEntry(
                date=verdict.date,
                included=not verdict.default_excluded and bool(verdict.eligible_sessions),
                session=verdict.default_session,
            )
            for _, verdict in pairs
        }
        self._check_invariant()

    def toggle_inclusion(self, day: date) -> bool:
        """
        Flip inclusion of a date.

        Returns:
            False (state unchanged) when the date has no eligible session
        """
        verdict = self.verdict(day)
        if not verdict.eligible_sessions:
            return False
        entry = self._entries[day]
        entry.included = not entry.included
        if entry.session not in verdict.eligible_sessions:
            entry.session = verdict.default_session
        self._check_invariant(day)
        return True

    def set_session(self, day: date, session: LeaveSession) -> None:
        """
        Choose the session taken on a date.

        Raises:
            InvalidSessionError: If the session is not eligible for that date
        """
        verdict = self.verdict(day)
        if session not in verdict.eligible_sessions:
            raise InvalidSessionError(
                f"Session {session.value} is not available on {day.isoformat()}",
                details={
                    "date": day.isoformat(),
                    "session": session.value,
                    "eligible_sessions": [s.value for s in verdict.eligible_sessions],
                },
            )
        self._entries[day].session = session
        self._check_invariant(day)

    def apply_overrides(self, overrides: Iterable[SelectionOverride]) -> None:
        """
        Replay manual changes: the session first, then inclusion.

        Raises:
            InvalidSessionError: If an override asks for an ineligible session
                or includes a date that has none
        """
        for override in overrides:
            if override.session is not None:
                self.set_session(override.date, override.session)
            if override.included is not None and override.included != self.entry(override.date).included:
                if not self.toggle_inclusion(override.date):
                    raise InvalidSessionError(
                        f"No session can be taken on {override.date.isoformat()}",
                        details={"date": override.date.isoformat()},
                    )

    def to_response(self) -> EligibilityReportResponse:
        rows = [
            EligibilityRow(
                date=fact.date,
                type_of_day=fact.type_of_day,
                holiday_name=fact.holiday_name,
                verdict=verdict,
                selection=entry.model_copy(),
                day_weight=day_weight(entry.session) if entry.included else Decimal("0"),
            )
            for fact, verdict, entry in self.rows()
        ]
        return EligibilityReportResponse(
            leave_type_id=self.policy.leave_type_id,
            date_from=self.date_from,
            date_to=self.date_to,
            total_days=self.total_days,
            note=self.policy.note,
            rows=rows,
        )

    def _require_date(self, day: date) -> None:
        if day not in self._entries:
            raise DateNotInRangeError(
                f"{day.isoformat()} is not part of the current selection",
                details={"date": day.isoformat()},
            )

    def _check_invariant(self, day: Optional[date] = None) -> None:
        days = [day] if day is not None else list(self._entries)
        for d in days:
            entry = self._entries[d]
            if entry.included and entry.session not in self._verdicts[d].eligible_sessions:
                raise AssertionError(f"Included date {d} has ineligible session {entry.session}")
