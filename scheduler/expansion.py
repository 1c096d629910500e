"""
Segment Expansion Logic.

Turns a recurring segment template into concrete shift instances for a
caller-supplied window. Two modes:
1. Fixed instances: one per qualifying day, each at start_time.
2. Continuous chain (is_repeat): each instance starts where the previous
   one ended, giving back-to-back coverage across day boundaries.
"""

import logging
from datetime import date as date_type, datetime, timedelta
from typing import List, Optional, Tuple

from models import (
    FrequencyType,
    SegmentTemplate,
    ShiftInstance,
    ShiftRequirements,
    TaskTemplate,
    Weekday,
    to_date_key,
)
from models.datekey import DateLike
from .outcome import Outcome, invalid_configuration, out_of_range

logger = logging.getLogger(__name__)


class SegmentExpander:
    """
    Expands segment templates into ShiftInstances.
    Holds no state, so repeated calls with the same inputs return equal lists.
    """

    def expand(
        self,
        segment: SegmentTemplate,
        start: DateLike,
        end: DateLike,
        anchor: Optional[DateLike] = None
    ) -> Outcome[List[ShiftInstance]]:
        """
        Instances of `segment` inside the inclusive day range [start, end].

        `anchor` only matters for continuous chains: it fixes the chain's
        origin (anchor day + start_time) so that the phase of the cycle is
        the same whichever window is requested.
        """
        first, last = to_date_key(start), to_date_key(end)
        if first > last:
            return out_of_range(f"Range start {first} is after range end {last}", segment.id)

        # Templates are validated on construction; re-check in case one was
        # built with model_construct() or came from an older record.
        error = segment.configuration_error()
        if error:
            return invalid_configuration(error, segment.id)

        if segment.is_repeat:
            if anchor is not None:
                instances = self._expand_anchored_chain(segment, first, last, to_date_key(anchor))
            else:
                instances = self._expand_chain(segment, first, last)
        else:
            instances = self._expand_fixed(segment, first, last)

        logger.debug(f"Segment {segment.id}: {len(instances)} instances for {first}..{last}")
        return Outcome.success(instances)

    def expand_task(self, task: TaskTemplate, start: DateLike, end: DateLike) -> Outcome[List[ShiftInstance]]:
        """
        All segments of a task, clipped to the task's validity window and
        ordered by start time (ties keep segment order).
        """
        first, last = to_date_key(start), to_date_key(end)
        if first > last:
            return out_of_range(f"Range start {first} is after range end {last}", task.id)

        # Clip to the task's own validity window
        if task.start_date and task.start_date > first:
            first = task.start_date
        if task.end_date and task.end_date < last:
            last = task.end_date
        if first > last:
            return Outcome.success([])

        keyed: List[Tuple[datetime, int, ShiftInstance]] = []
        for order, segment in enumerate(task.segments):
            outcome = self.expand(segment, first, last, anchor=task.start_date)
            if not outcome.ok:
                return outcome
            for instance in outcome.value:
                keyed.append((instance.start, order, instance))

        keyed.sort(key=lambda x: (x[0], x[1]))
        return Outcome.success([instance for _, _, instance in keyed])

    # --- Frequency rules ---

    def _qualifying_days(self, segment: SegmentTemplate, first: date_type, last: date_type) -> List[date_type]:
        """Days in [first, last] on which the segment occurs."""
        if segment.frequency == FrequencyType.SPECIFIC_DATE:
            if first <= segment.specific_date <= last:
                return [segment.specific_date]
            return []

        days = []
        current = first
        while current <= last:
            if segment.frequency == FrequencyType.DAILY:
                days.append(current)
            elif segment.frequency == FrequencyType.WEEKLY and Weekday.of(current) in segment.days_of_week:
                days.append(current)
            current += timedelta(days=1)
        return days

    def _expand_fixed(self, segment: SegmentTemplate, first: date_type, last: date_type) -> List[ShiftInstance]:
        requirements = ShiftRequirements.from_segment(segment)
        period = timedelta(hours=segment.duration_hours)

        instances = []
        for day in self._qualifying_days(segment, first, last):
            shift_start = datetime.combine(day, segment.start_time)
            instances.append(self._build(segment, shift_start, shift_start + period, requirements))
        return instances

    def _expand_chain(self, segment: SegmentTemplate, first: date_type, last: date_type) -> List[ShiftInstance]:
        """Chain from the first qualifying day up to the end of the window."""
        days = self._qualifying_days(segment, first, last)
        if not days:
            return []

        window_end = datetime.combine(last + timedelta(days=1), datetime.min.time())
        current = datetime.combine(days[0], segment.start_time)
        return self._walk_chain(segment, current, None, window_end)

    def _expand_anchored_chain(
        self,
        segment: SegmentTemplate,
        first: date_type,
        last: date_type,
        anchor: date_type
    ) -> List[ShiftInstance]:
        """Chain with a fixed origin, fast-forwarded by whole periods into the window."""
        window_start = datetime.combine(first, datetime.min.time())
        window_end = datetime.combine(last + timedelta(days=1), datetime.min.time())
        period = timedelta(hours=segment.duration_hours)

        origin = self._chain_origin(segment, anchor)
        if origin is None:
            return []

        # Links never start before the origin: the fast-forward only moves forward
        current = datetime.combine(origin, segment.start_time)
        if current >= window_end:
            return []

        if current < window_start:
            # Skip whole links that end before the window opens, keeping the phase
            current += ((window_start - current) // period) * period

        return self._walk_chain(segment, current, window_start, window_end)

    def _chain_origin(self, segment: SegmentTemplate, anchor: date_type) -> Optional[date_type]:
        """First qualifying day on or after the anchor, or None if there is none."""
        if segment.frequency == FrequencyType.SPECIFIC_DATE:
            if segment.specific_date < anchor:
                return None
            return segment.specific_date
        if segment.frequency == FrequencyType.WEEKLY:
            day = anchor
            while Weekday.of(day) not in segment.days_of_week:
                day += timedelta(days=1)
            return day
        return anchor

    def _walk_chain(
        self,
        segment: SegmentTemplate,
        current: datetime,
        window_start: Optional[datetime],
        window_end: datetime
    ) -> List[ShiftInstance]:
        requirements = ShiftRequirements.from_segment(segment)
        period = timedelta(hours=segment.duration_hours)

        instances = []
        while current < window_end:
            link_end = current + period
            if window_start is None or link_end > window_start:
                instances.append(self._build(segment, current, link_end, requirements))
            current = link_end
        return instances

    def _build(
        self,
        segment: SegmentTemplate,
        start: datetime,
        end: datetime,
        requirements: ShiftRequirements
    ) -> ShiftInstance:
        return ShiftInstance(
            segment_id=segment.id,
            task_id=segment.task_id,
            start=start,
            end=end,
            requirements=requirements
        )
