"""
Rotation Cycle Logic.

This module answers: "Where is team X on date Y?"
Statuses are a pure function of the rotation record and the day key,
so nothing here is cached or persisted.
"""

import logging
from datetime import date as date_type, time as time_type, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from models import DayStatus, RotationDefinition, to_date_key, days_between
from models.datekey import DateLike
from .outcome import Outcome, invalid_configuration, out_of_range

logger = logging.getLogger(__name__)

START_OF_DAY = time_type(0, 0)
END_OF_DAY = time_type(23, 59)

PresenceWindow = Tuple[time_type, time_type]


class RotationCycleCalculator:
    """
    Derives day statuses from a rotation definition.
    Stateless: a single instance can serve any number of teams.
    """

    def status(self, definition: RotationDefinition, date: DateLike) -> Outcome[DayStatus]:
        """
        Status of the rotation on a single day.

        Tie-break order: Arrival, Full, Departure, Home. With days_on_base == 1
        the only active day matches Arrival first, so it never reports Departure.
        """
        diff_days = days_between(definition.start_date, date)
        if diff_days < 0:
            return Outcome.success(DayStatus.NOT_STARTED)

        cycle_length = definition.days_on_base + definition.days_at_home
        if cycle_length <= 0:
            return invalid_configuration(
                f"Rotation cycle length must be positive (got {cycle_length})",
                definition.team_id
            )

        # Python's % is already non-negative for a positive modulus
        day_in_cycle = diff_days % cycle_length

        if day_in_cycle == 0:
            return Outcome.success(DayStatus.ARRIVAL)
        if day_in_cycle < definition.days_on_base - 1:
            return Outcome.success(DayStatus.FULL)
        if day_in_cycle == definition.days_on_base - 1:
            return Outcome.success(DayStatus.DEPARTURE)
        return Outcome.success(DayStatus.HOME)

    def statuses(
        self,
        definition: RotationDefinition,
        start: DateLike,
        end: DateLike
    ) -> Outcome[List[Tuple[date_type, DayStatus]]]:
        """One (date, status) pair per day of the inclusive range."""
        first, last = to_date_key(start), to_date_key(end)
        if first > last:
            return out_of_range(f"Range start {first} is after range end {last}", definition.team_id)

        result = []
        current = first
        while current <= last:
            outcome = self.status(definition, current)
            if not outcome.ok:
                return outcome
            result.append((current, outcome.value))
            current += timedelta(days=1)
        return Outcome.success(result)

    def presence_window(self, definition: RotationDefinition, date: DateLike) -> Outcome[Optional[PresenceWindow]]:
        """
        On-base hours for the day, or None when the team is away.
        Arrival days start at arrival_time; departure days end at departure_time.
        """
        outcome = self.status(definition, date)
        if not outcome.ok:
            return outcome

        status = outcome.value
        if status == DayStatus.ARRIVAL:
            return Outcome.success((definition.arrival_time, END_OF_DAY))
        if status == DayStatus.FULL:
            return Outcome.success((START_OF_DAY, END_OF_DAY))
        if status == DayStatus.DEPARTURE:
            return Outcome.success((START_OF_DAY, definition.departure_time))
        return Outcome.success(None)

    def team_calendar(
        self,
        rotations: Iterable[RotationDefinition],
        start: DateLike,
        end: DateLike
    ) -> Outcome[Dict[str, List[Tuple[date_type, DayStatus]]]]:
        """Status rows for every team over a range, keyed by team id."""
        calendar = {}
        for definition in rotations:
            outcome = self.statuses(definition, start, end)
            if not outcome.ok:
                logger.warning(f"Rotation for team {definition.team_id} rejected: {outcome.failure.reason}")
                return outcome
            calendar[definition.team_id] = outcome.value
        return Outcome.success(calendar)

    def on_base_count(self, rotations: Iterable[RotationDefinition], date: DateLike) -> Outcome[int]:
        """How many teams are physically present (arriving, full or departing) on the day."""
        count = 0
        for definition in rotations:
            outcome = self.status(definition, date)
            if not outcome.ok:
                return outcome
            if outcome.value.is_on_base:
                count += 1
        return Outcome.success(count)
