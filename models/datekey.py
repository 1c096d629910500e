"""
Day-granularity date keys.

Every date the engine compares goes through `to_date_key` first, so that
"2025-03-30T23:30:00+03:00" and a naive 2025-03-30 are the same day.
Time of day and timezone offsets are dropped, never converted.
"""

from datetime import date, datetime
from typing import Annotated, Union

from pydantic import BeforeValidator

DateLike = Union[date, datetime, str]


def to_date_key(value: DateLike) -> date:
    """Normalize a date, datetime or ISO string to its calendar date."""
    if isinstance(value, datetime):
        # Wall-clock date as written; astimezone() would shift the day.
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")
        # Accept "YYYY-MM-DD" as well as full ISO timestamps, nothing else.
        try:
            if len(text) > 10:
                if text.endswith("Z"):
                    text = text[:-1] + "+00:00"
                return datetime.fromisoformat(text).date()
            return date.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Not an ISO date: {value!r}") from None
    raise TypeError(f"Cannot build a date key from {type(value).__name__}")


def day_index(value: DateLike) -> int:
    """Integer day number; differences between two keys are exact day counts."""
    return to_date_key(value).toordinal()


def days_between(start: DateLike, end: DateLike) -> int:
    return day_index(end) - day_index(start)


# Pydantic field type: accepts anything `to_date_key` does and stores a date.
DateKey = Annotated[date, BeforeValidator(to_date_key)]
