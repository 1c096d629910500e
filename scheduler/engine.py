"""
The Rotation & Shift Scheduling Engine.

This module ties the calculators together for one window:
1. Rotation calendars - day status per team.
2. Segment expansion - concrete shifts per task, with staffing snapshots.
3. Staffing resolution - flags role ids that left the catalog.
4. Rest compliance - violations in the callers' assignments.

A failure in one record (a bad rotation, a malformed segment) is recorded
and the run continues with the rest.
"""

import logging
from datetime import timedelta
from typing import List, Mapping, Optional, Sequence

from models import RotationDefinition, TaskTemplate, Role, ShiftInstance, to_date_key
from models.datekey import DateLike
from .constraints import RestConstraintChecker
from .expansion import SegmentExpander
from .outcome import FailureType, EngineFailure
from .rotation import RotationCycleCalculator
from .staffing import StaffingResolver
from .state import EngineState

logger = logging.getLogger(__name__)


class RotaEngine:
    """
    Main engine facade.
    Ingests rotation, task and role records; outputs an EngineState.
    """

    DEFAULT_WINDOW_DAYS = 30

    def __init__(
        self,
        rotations: List[RotationDefinition],
        tasks: List[TaskTemplate],
        roles: List[Role],
        start_date: DateLike,
        duration_days: int = DEFAULT_WINDOW_DAYS
    ):
        self.rotations = rotations
        self.tasks = tasks
        self.roles = roles
        self.start_date = to_date_key(start_date)
        self.duration_days = duration_days
        self.end_date = self.start_date + timedelta(days=duration_days - 1)

        # Initialize Helpers
        self.calculator = RotationCycleCalculator()
        self.expander = SegmentExpander()
        self.resolver = StaffingResolver()
        self.checker = RestConstraintChecker()

    def run(self, assignments: Optional[Mapping[str, Sequence[ShiftInstance]]] = None) -> EngineState:
        """
        Execute the pipeline. `assignments` maps person id -> that person's shifts.
        """
        logger.info(f"Starting engine run for {self.start_date}..{self.end_date}")
        state = EngineState()

        if self.duration_days < 1:
            state.record_failure(EngineFailure(
                FailureType.OUT_OF_RANGE_REQUEST,
                f"Window must cover at least one day (got {self.duration_days})"
            ))
            logger.error("Empty window, nothing computed")
            return state

        # 1. Rotation calendars
        for rotation in self.rotations:
            outcome = self.calculator.statuses(rotation, self.start_date, self.end_date)
            if outcome.ok:
                state.set_team_statuses(rotation.team_id, outcome.value)
            else:
                logger.warning(f"Skipping rotation of team {rotation.team_id}: {outcome.failure.reason}")
                state.record_failure(outcome.failure)

        # 2. Shift expansion, task by task
        for task in self.tasks:
            outcome = self.expander.expand_task(task, self.start_date, self.end_date)
            if outcome.ok:
                state.add_shifts(outcome.value)
                logger.debug(f"Task {task.name}: {len(outcome.value)} shifts")
            else:
                logger.warning(f"Skipping task {task.name}: {outcome.failure.reason}")
                state.record_failure(outcome.failure)

            # 3. Staffing per segment
            for segment in task.segments:
                resolved = self.resolver.resolve_segment(segment, self.roles)
                state.set_staffing(segment.id, resolved.value, resolved.warnings)

        # 4. Rest compliance
        if assignments:
            state.set_violations(self.checker.check_roster(assignments))

        stats = state.get_statistics()
        logger.info(
            f"Engine run complete: {stats['total_shifts']} shifts, "
            f"{stats['stale_role_warnings']} stale roles, {stats['failures']} failures, "
            f"{stats['rest_violations']} rest violations"
        )
        return state
