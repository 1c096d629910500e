"""
Rotation data models.

A team rotation is a repeating on-base / at-home pattern anchored at a
start date. The day status is never stored; it is always recomputed from
the rotation record (see scheduler/rotation.py).
"""

from enum import Enum
from datetime import time
from pydantic import BaseModel, Field, ConfigDict

from .datekey import DateKey


class DayStatus(str, Enum):
    """Where a team stands on a given day of its rotation."""
    NOT_STARTED = "NotStarted"
    ARRIVAL = "Arrival"
    FULL = "Full"
    DEPARTURE = "Departure"
    HOME = "Home"

    @property
    def is_on_base(self) -> bool:
        return self in (DayStatus.ARRIVAL, DayStatus.FULL, DayStatus.DEPARTURE)


class RotationDefinition(BaseModel):
    """
    Cyclic deployment rotation for one team.
    Immutable: an edit replaces the whole record.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "team_id": "team_alpha",
                "start_date": "2025-01-05",
                "days_on_base": 11,
                "days_at_home": 3,
                "arrival_time": "10:00",
                "departure_time": "14:00"
            }
        }
    )

    team_id: str = Field(description="Team this rotation belongs to")
    start_date: DateKey = Field(description="Anchor date: day 0 of the first cycle")
    days_on_base: int = Field(gt=0, description="Consecutive days present, including arrival and departure days")
    days_at_home: int = Field(gt=0, description="Consecutive days away")

    # --- Presence hours on transition days ---
    arrival_time: time = Field(default=time(10, 0), description="Time the team reports on arrival day")
    departure_time: time = Field(default=time(14, 0), description="Time the team leaves on departure day")

    @property
    def cycle_length(self) -> int:
        return self.days_on_base + self.days_at_home
