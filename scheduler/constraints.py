"""
Rest Constraint Validation Logic.

This module answers: "Did person X get enough rest between shifts?"
It only detects violations; resolving them (re-assigning people) belongs
to whoever commits the schedule.
"""

import logging
from datetime import date as date_type, timedelta
from typing import Dict, List, Mapping, Optional, Sequence
from dataclasses import dataclass

from models import ShiftInstance, to_date_key
from models.datekey import DateLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestViolation:
    """Two consecutive shifts with less rest between them than the first one requires."""
    first: ShiftInstance
    second: ShiftInstance
    required_rest: timedelta
    actual_rest: timedelta  # negative when the shifts overlap
    person_id: Optional[str] = None

    @property
    def shortfall(self) -> timedelta:
        return self.required_rest - self.actual_rest

    @property
    def severity(self) -> str:
        # Less than half the required rest is treated as a hard breach
        return "high" if self.actual_rest < self.required_rest / 2 else "medium"

    @property
    def reason(self) -> str:
        actual = self.actual_rest.total_seconds() / 3600
        required = self.required_rest.total_seconds() / 3600
        return f"Rest too short: {actual:.1f}h (requires {required:g}h)"


class RestConstraintChecker:
    """
    Validates minimum-rest constraints over one person's assignments.
    """

    def check(self, assignments: Sequence[ShiftInstance], person_id: Optional[str] = None) -> List[RestViolation]:
        """
        Every consecutive pair (a, b) with b.start < a.end + a's minimum rest.
        All violations are returned, not just the first.
        """
        # Stable sort: equal starts keep the caller's order
        ordered = sorted(assignments, key=lambda s: s.start)

        violations = []
        for current, following in zip(ordered, ordered[1:]):
            rest_until = current.end + current.min_rest_after
            if following.start < rest_until:
                violations.append(RestViolation(
                    first=current,
                    second=following,
                    required_rest=current.min_rest_after,
                    actual_rest=following.start - current.end,
                    person_id=person_id
                ))

        if violations:
            logger.debug(f"{len(violations)} rest violations for {person_id or 'assignment list'}")
        return violations

    def check_roster(
        self,
        assignments_by_person: Mapping[str, Sequence[ShiftInstance]],
        on_date: Optional[DateLike] = None
    ) -> Dict[str, List[RestViolation]]:
        """
        Rest violations for every person. With `on_date`, only violations whose
        second shift starts on that day are kept. People without violations
        are left out of the result.
        """
        day: Optional[date_type] = to_date_key(on_date) if on_date is not None else None

        report = {}
        for person_id, shifts in assignments_by_person.items():
            found = self.check(shifts, person_id=person_id)
            if day is not None:
                found = [v for v in found if v.second.start.date() == day]
            if found:
                report[person_id] = found
        return report
