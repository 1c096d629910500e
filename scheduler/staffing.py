"""
Staffing Requirement Logic.

Resolves a segment's role composition against the current role catalog.
Roles deleted from the catalog are surfaced as stale references rather
than dropped: their headcount still counts toward the requirement until
an operator removes them from the composition.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Union

from models import FrequencyType, Role, RoleComposition, SegmentTemplate
from .outcome import Outcome, StaleReference, invalid_configuration

logger = logging.getLogger(__name__)

RoleCatalog = Iterable[Union[str, Role]]

HOURS_PER_DAY = 24


@dataclass(frozen=True)
class StaffingRequirement:
    required: int
    by_role: Dict[str, int] = field(default_factory=dict)
    stale_roles: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class HeadcountEstimate:
    """Standing headcount needed to keep a task's daily segments staffed."""
    daily_man_hours: float
    work_ratio: float
    exact_staff: float
    staff_needed: int


def catalog_ids(catalog: RoleCatalog) -> FrozenSet[str]:
    """Role ids from ids, Role models or an id -> name mapping."""
    if isinstance(catalog, str):
        # A bare id would otherwise be iterated character by character
        raise TypeError("Role catalog must be a collection of role ids, not a single string")
    return frozenset(r.id if isinstance(r, Role) else r for r in catalog)


class StaffingResolver:
    """Computes headcount requirements for role compositions."""

    def resolve(
        self,
        composition: RoleComposition,
        catalog: RoleCatalog,
        subject_id: Optional[str] = None
    ) -> Outcome[StaffingRequirement]:
        known = catalog_ids(catalog)

        by_role = {}
        stale = []
        for req in composition:
            by_role[req.role_id] = req.count
            if req.role_id not in known:
                stale.append(StaleReference(role_id=req.role_id, count=req.count, subject_id=subject_id))

        for ref in stale:
            logger.warning(f"Stale role reference in {subject_id or 'composition'}: {ref.reason}")

        requirement = StaffingRequirement(
            required=sum(by_role.values()),
            by_role=by_role,
            stale_roles=frozenset(ref.role_id for ref in stale)
        )
        return Outcome.success(requirement, warnings=tuple(stale))

    def resolve_segment(self, segment: SegmentTemplate, catalog: RoleCatalog) -> Outcome[StaffingRequirement]:
        return self.resolve(segment.role_composition, catalog, subject_id=segment.id)

    def estimate_headcount(self, segments: Iterable[SegmentTemplate]) -> Outcome[HeadcountEstimate]:
        """
        Staff needed to cover a task around the clock.

        Man-hours per day come from continuous segments (24h x people) and
        daily segments (duration x people). The work ratio is
        avg_duration / (avg_duration + avg_rest), with rest weighted by
        shift duration, so staff = man_hours / (24 * ratio).
        Weekly and one-off segments do not add to the daily load.
        """
        segments = list(segments)
        if not segments:
            return invalid_configuration("No segments defined")

        daily_man_hours = 0.0
        total_duration = 0.0
        total_rest = 0.0
        for seg in segments:
            if seg.is_repeat:
                daily_man_hours += HOURS_PER_DAY * seg.required_people
            elif seg.frequency == FrequencyType.DAILY:
                daily_man_hours += seg.duration_hours * seg.required_people
            else:
                continue
            total_duration += seg.duration_hours
            total_rest += seg.min_rest_hours_after * seg.duration_hours

        if total_duration == 0:
            return invalid_configuration("No daily or continuous segments to estimate from")

        avg_rest = total_rest / total_duration
        # Averaged over every segment, matching how the load is reported per task
        avg_duration = total_duration / len(segments)
        work_ratio = avg_duration / (avg_duration + avg_rest)

        exact = daily_man_hours / (HOURS_PER_DAY * work_ratio)
        return Outcome.success(HeadcountEstimate(
            daily_man_hours=daily_man_hours,
            work_ratio=work_ratio,
            exact_staff=exact,
            staff_needed=math.ceil(exact)
        ))
