"""
Data models package for the rotation & shift-segment scheduling engine.

This package exports the three groups of the data architecture:
1. Rotation (RotationDefinition, DayStatus)
2. Templates (SegmentTemplate, TaskTemplate, RoleComposition, Role)
3. Output (ShiftInstance, ShiftRequirements)
"""

from .datekey import (
    DateKey,
    to_date_key,
    day_index,
    days_between
)

from .rotation import (
    RotationDefinition,
    DayStatus
)

from .segment import (
    Weekday,
    FrequencyType,
    Role,
    RoleRequirement,
    RoleComposition,
    SegmentTemplate,
    TaskTemplate
)

from .shift import (
    ShiftInstance,
    ShiftRequirements
)

__all__ = [
    # --- Day keys ---
    "DateKey",
    "to_date_key",
    "day_index",
    "days_between",

    # --- Rotation Models ---
    "RotationDefinition",
    "DayStatus",

    # --- Template Models ---
    "Weekday",
    "FrequencyType",
    "Role",
    "RoleRequirement",
    "RoleComposition",
    "SegmentTemplate",
    "TaskTemplate",

    # --- Output Models ---
    "ShiftInstance",
    "ShiftRequirements",
]
