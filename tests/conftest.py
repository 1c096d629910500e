from datetime import date, datetime

import pytest

from models import (
    Role,
    RotationDefinition,
    SegmentTemplate,
    ShiftInstance,
    ShiftRequirements,
    TaskTemplate,
)


@pytest.fixture
def d0() -> date:
    # A Sunday
    return date(2025, 1, 5)


@pytest.fixture
def rotation(d0) -> RotationDefinition:
    return RotationDefinition(team_id="team_alpha", start_date=d0, days_on_base=4, days_at_home=3)


@pytest.fixture
def roles():
    return [
        Role(id="role_guard", name="Guard"),
        Role(id="role_driver", name="Driver"),
        Role(id="role_medic", name="Medic"),
    ]


def make_segment(**overrides) -> SegmentTemplate:
    fields = {
        "id": "seg_morning",
        "task_id": "task_gate",
        "name": "Morning",
        "start_time": "08:00",
        "duration_hours": 8,
        "frequency": "Daily",
        "role_composition": [{"role_id": "role_guard", "count": 2}],
        "min_rest_hours_after": 8,
    }
    fields.update(overrides)
    return SegmentTemplate(**fields)


def make_shift(start: datetime, end: datetime, min_rest: int = 8, segment_id: str = "seg_morning") -> ShiftInstance:
    return ShiftInstance(
        segment_id=segment_id,
        task_id="task_gate",
        start=start,
        end=end,
        requirements=ShiftRequirements(required_people=1, min_rest_hours_after=min_rest),
    )


@pytest.fixture
def gate_task() -> TaskTemplate:
    return TaskTemplate(
        id="task_gate",
        name="Gate",
        segments=(
            make_segment(id="seg_247", name="Gate 24/7", start_time="06:00", is_repeat=True),
            make_segment(
                id="seg_patrol",
                name="Patrol",
                start_time="10:00",
                duration_hours=4,
                frequency="Weekly",
                days_of_week=["monday", "thursday"],
                role_composition=[{"role_id": "role_driver", "count": 1}, {"role_id": "role_ghost", "count": 1}],
            ),
        ),
    )
