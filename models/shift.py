"""
Shift data models.

This module defines the 'Output' of segment expansion: concrete shift
instances, generated on demand for a window and discarded after use.
The template stays the source of truth.
"""

from datetime import datetime, timedelta
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .segment import RoleComposition, SegmentTemplate


class ShiftRequirements(BaseModel):
    """Snapshot of the segment's staffing needs at generation time."""
    model_config = ConfigDict(frozen=True)

    required_people: int = Field(ge=0)
    role_composition: RoleComposition = Field(default_factory=RoleComposition)
    min_rest_hours_after: int = Field(default=0, ge=0)

    @classmethod
    def from_segment(cls, segment: SegmentTemplate) -> "ShiftRequirements":
        return cls(
            required_people=segment.required_people,
            role_composition=segment.role_composition,
            min_rest_hours_after=segment.min_rest_hours_after,
        )


class ShiftInstance(BaseModel):
    """A concrete occurrence of a segment."""
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "segment_id": "seg_gate_247",
                "task_id": "task_gate",
                "start": "2025-01-15T06:00:00",
                "end": "2025-01-15T14:00:00",
                "requirements": {
                    "required_people": 2,
                    "role_composition": [{"role_id": "role_guard", "count": 2}],
                    "min_rest_hours_after": 8
                }
            }
        }
    )

    segment_id: str = Field(description="Template this instance was generated from")
    task_id: str = Field(description="Task owning the template")
    start: datetime
    end: datetime
    requirements: ShiftRequirements

    @model_validator(mode='after')
    def validate_span(self):
        if self.end <= self.start:
            raise ValueError("Shift end must be strictly after its start")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def min_rest_after(self) -> timedelta:
        return timedelta(hours=self.requirements.min_rest_hours_after)
