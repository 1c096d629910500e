"""
Segment and role-composition data models.

A segment template is the operator-authored definition of a recurring
shift: when it starts, how long it lasts, how often it occurs and which
roles it needs. The engine treats templates as read-only input.
"""

from enum import Enum
from typing import Optional, Tuple, FrozenSet, Iterator, List
from pydantic import BaseModel, RootModel, Field, field_validator, model_validator, ConfigDict
from datetime import date, time

from .datekey import DateKey


class Weekday(str, Enum):
    """Day names as the scheduling records store them."""
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        # date.weekday(): 0=Monday ... 6=Sunday
        return _BY_PYTHON_WEEKDAY[day.weekday()]


_BY_PYTHON_WEEKDAY = (
    Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY,
    Weekday.FRIDAY, Weekday.SATURDAY, Weekday.SUNDAY,
)


class FrequencyType(str, Enum):
    """Recurrence pattern of a segment."""
    DAILY = "Daily"
    WEEKLY = "Weekly"
    SPECIFIC_DATE = "SpecificDate"


class Role(BaseModel):
    """Catalog entry. Roles are opaque ids to the engine; the name is for reports."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)


class RoleRequirement(BaseModel):
    """Headcount needed for one role."""
    model_config = ConfigDict(frozen=True)

    role_id: str = Field(min_length=1)
    count: int = Field(ge=1)


class RoleComposition(RootModel[Tuple[RoleRequirement, ...]]):
    """
    Ordered set of role requirements, unique by role id.
    Edits return a new composition; a count that drops to zero removes
    the entry instead of storing it.
    """
    model_config = ConfigDict(frozen=True)

    root: Tuple[RoleRequirement, ...] = ()

    @field_validator('root', mode='before')
    @classmethod
    def drop_empty_entries(cls, v):
        if v is None:
            return ()
        kept = []
        for item in v:
            count = item.get('count') if isinstance(item, dict) else getattr(item, 'count', None)
            if count == 0:
                continue
            kept.append(item)
        return tuple(kept)

    @model_validator(mode='after')
    def validate_unique_roles(self):
        seen = set()
        for req in self.root:
            if req.role_id in seen:
                raise ValueError(f"Role {req.role_id} appears more than once in the composition")
            seen.add(req.role_id)
        return self

    def __iter__(self) -> Iterator[RoleRequirement]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    @property
    def role_ids(self) -> List[str]:
        return [req.role_id for req in self.root]

    @property
    def total(self) -> int:
        return sum(req.count for req in self.root)

    def count_for(self, role_id: str) -> int:
        for req in self.root:
            if req.role_id == role_id:
                return req.count
        return 0

    def with_count(self, role_id: str, count: int) -> "RoleComposition":
        """Set a role's headcount. Existing roles keep their position, new ones go last."""
        if count < 0:
            raise ValueError("Role count cannot be negative")

        entries = []
        replaced = False
        for req in self.root:
            if req.role_id == role_id:
                replaced = True
                if count > 0:
                    entries.append(RoleRequirement(role_id=role_id, count=count))
            else:
                entries.append(req)

        if not replaced and count > 0:
            entries.append(RoleRequirement(role_id=role_id, count=count))
        return RoleComposition(tuple(entries))

    def adjust(self, role_id: str, delta: int) -> "RoleComposition":
        """Increment/decrement a role's headcount, clamping at zero."""
        current = self.count_for(role_id)
        if current == 0 and delta <= 0:
            return self
        return self.with_count(role_id, max(0, current + delta))


class SegmentTemplate(BaseModel):
    """
    Recurring shift definition.
    Either expanded independently per qualifying day, or (is_repeat) chained
    back-to-back from the first qualifying day.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "seg_gate_247",
                "task_id": "task_gate",
                "name": "Gate Guard",
                "start_time": "06:00",
                "duration_hours": 8,
                "frequency": "Daily",
                "role_composition": [{"role_id": "role_guard", "count": 2}],
                "min_rest_hours_after": 8,
                "is_repeat": True
            }
        }
    )

    # --- Identity ---
    id: str = Field(description="Unique identifier of the segment")
    task_id: str = Field(description="Task this segment belongs to")
    name: str = Field(min_length=1, description="e.g. 'Morning Shift'")

    # --- Timing & Frequency ---
    start_time: time = Field(description="Wall-clock start, HH:MM")
    duration_hours: float = Field(gt=0, description="Length of each instance")
    frequency: FrequencyType = Field(description="Recurrence pattern")
    days_of_week: Optional[FrozenSet[Weekday]] = Field(
        default=None,
        description="Qualifying weekdays. Only valid for Weekly frequency."
    )
    specific_date: Optional[DateKey] = Field(
        default=None,
        description="The single qualifying date. Only valid for SpecificDate frequency."
    )

    # --- Staffing ---
    role_composition: RoleComposition = Field(default_factory=RoleComposition)
    min_rest_hours_after: int = Field(default=0, ge=0, description="Rest owed to a person after this shift")
    is_repeat: bool = Field(default=False, description="Continuous back-to-back cycle")

    @field_validator('days_of_week', mode='before')
    @classmethod
    def normalize_day_names(cls, v):
        if v is None:
            return v
        return [d.lower() if isinstance(d, str) else d for d in v]

    @model_validator(mode='after')
    def validate_configuration(self):
        error = self.configuration_error()
        if error:
            raise ValueError(error)
        return self

    def configuration_error(self) -> Optional[str]:
        """First invariant this template breaks, or None."""
        if self.duration_hours <= 0:
            return "Segment duration must be positive"

        if self.is_repeat and self.duration_hours >= 24:
            return "A continuous cycle needs a shift shorter than 24 hours; use Daily frequency instead"

        if self.frequency == FrequencyType.WEEKLY and not self.days_of_week:
            return "Weekly frequency requires 'days_of_week'"
        if self.frequency != FrequencyType.WEEKLY and self.days_of_week:
            return f"{self.frequency.value} frequency cannot specify days_of_week"

        if self.frequency == FrequencyType.SPECIFIC_DATE and self.specific_date is None:
            return "SpecificDate frequency requires 'specific_date'"
        if self.frequency != FrequencyType.SPECIFIC_DATE and self.specific_date is not None:
            return f"{self.frequency.value} frequency cannot specify specific_date"

        if self.min_rest_hours_after < 0:
            return "Minimum rest cannot be negative"
        return None

    @property
    def required_people(self) -> int:
        return self.role_composition.total


class TaskTemplate(BaseModel):
    """A named group of segments with an optional validity window."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    segments: Tuple[SegmentTemplate, ...] = ()
    start_date: Optional[DateKey] = Field(default=None, description="Valid from (inclusive)")
    end_date: Optional[DateKey] = Field(default=None, description="Valid until (inclusive)")

    @model_validator(mode='after')
    def validate_task(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Task end date cannot be before start date")

        seen = set()
        for seg in self.segments:
            if seg.task_id != self.id:
                raise ValueError(f"Segment {seg.id} belongs to task {seg.task_id}, not {self.id}")
            if seg.id in seen:
                raise ValueError(f"Duplicate segment id {seg.id}")
            seen.add(seg.id)
        return self
