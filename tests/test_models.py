from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from conftest import make_segment
from models import (
    DayStatus,
    RoleComposition,
    RotationDefinition,
    TaskTemplate,
    Weekday,
    day_index,
    days_between,
    to_date_key,
)


# --- Date keys ---

def test_date_key_drops_time_and_offset():
    late_evening = datetime(2025, 3, 30, 23, 30, tzinfo=timezone(timedelta(hours=3)))
    assert to_date_key(late_evening) == date(2025, 3, 30)
    assert to_date_key("2025-03-30T23:30:00+03:00") == date(2025, 3, 30)
    assert to_date_key("2025-03-30") == date(2025, 3, 30)


def test_day_difference_across_dst_change():
    # Europe switches to summer time on 2025-03-30; day counts must not care
    assert days_between("2025-03-29", "2025-03-31") == 2
    assert day_index(date(2025, 1, 2)) - day_index(datetime(2025, 1, 1, 23, 59)) == 1


def test_date_key_accepts_utc_suffix():
    assert to_date_key("2025-03-30T08:00:00Z") == date(2025, 3, 30)


@pytest.mark.parametrize("bad", ["", "not-a-date", "2025-13-01", "2025-01-05xyz", "2025-01-05T25:00"])
def test_date_key_rejects_garbage(bad):
    with pytest.raises(ValueError):
        to_date_key(bad)


def test_weekday_of():
    assert Weekday.of(date(2025, 1, 5)) == Weekday.SUNDAY
    assert Weekday.of(date(2025, 1, 6)) == Weekday.MONDAY
    assert Weekday.of(date(2025, 1, 11)) == Weekday.SATURDAY


# --- Rotation ---

def test_rotation_parses_iso_start_and_computes_cycle():
    rot = RotationDefinition(team_id="t", start_date="2025-01-05T09:00:00", days_on_base=11, days_at_home=3)
    assert rot.start_date == date(2025, 1, 5)
    assert rot.cycle_length == 14


@pytest.mark.parametrize("on,home", [(0, 3), (4, 0), (-1, 5)])
def test_rotation_rejects_non_positive_periods(on, home):
    with pytest.raises(ValidationError):
        RotationDefinition(team_id="t", start_date="2025-01-05", days_on_base=on, days_at_home=home)


def test_rotation_is_immutable(rotation):
    with pytest.raises(ValidationError):
        rotation.days_on_base = 7
    replaced = rotation.model_copy(update={"days_on_base": 7})
    assert replaced.days_on_base == 7
    assert rotation.days_on_base == 4


def test_day_status_on_base():
    assert DayStatus.ARRIVAL.is_on_base
    assert DayStatus.DEPARTURE.is_on_base
    assert not DayStatus.HOME.is_on_base
    assert not DayStatus.NOT_STARTED.is_on_base


# --- Role composition ---

def test_composition_drops_zero_counts():
    comp = RoleComposition([{"role_id": "a", "count": 2}, {"role_id": "b", "count": 0}])
    assert comp.role_ids == ["a"]
    assert comp.total == 2


def test_composition_rejects_duplicates_and_negative_counts():
    with pytest.raises(ValidationError):
        RoleComposition([{"role_id": "a", "count": 1}, {"role_id": "a", "count": 2}])
    with pytest.raises(ValidationError):
        RoleComposition([{"role_id": "a", "count": -1}])


def test_composition_edits_return_new_values():
    comp = RoleComposition([{"role_id": "a", "count": 2}, {"role_id": "b", "count": 1}])

    more = comp.adjust("a", 1)
    assert more.count_for("a") == 3
    assert comp.count_for("a") == 2

    # Dropping to zero removes the entry; order of the rest is kept
    fewer = comp.adjust("a", -5)
    assert fewer.role_ids == ["b"]

    added = comp.with_count("c", 4)
    assert added.role_ids == ["a", "b", "c"]
    assert added.total == 7

    # Decrementing a role that is not there is a no-op
    assert comp.adjust("zzz", -1) is comp


# --- Segment templates ---

def test_segment_required_people_is_composition_total():
    seg = make_segment(role_composition=[{"role_id": "a", "count": 2}, {"role_id": "b", "count": 3}])
    assert seg.required_people == 5


def test_repeat_segment_must_be_shorter_than_a_day():
    with pytest.raises(ValidationError, match="shorter than 24 hours"):
        make_segment(is_repeat=True, duration_hours=24)
    assert make_segment(is_repeat=True, duration_hours=23.5).is_repeat


def test_frequency_specific_fields():
    with pytest.raises(ValidationError, match="days_of_week"):
        make_segment(frequency="Weekly")
    with pytest.raises(ValidationError, match="specific_date"):
        make_segment(frequency="SpecificDate")
    with pytest.raises(ValidationError):
        make_segment(frequency="Daily", days_of_week=["monday"])

    weekly = make_segment(frequency="Weekly", days_of_week=["Monday", "friday"])
    assert weekly.days_of_week == frozenset({Weekday.MONDAY, Weekday.FRIDAY})


def test_configuration_error_catches_unvalidated_templates():
    seg = make_segment()
    broken = seg.model_construct(**{**seg.__dict__, "is_repeat": True, "duration_hours": 30})
    assert "24 hours" in broken.configuration_error()
    assert seg.configuration_error() is None


def test_task_validates_window_and_segment_ownership():
    with pytest.raises(ValidationError):
        TaskTemplate(id="t1", name="Gate", start_date="2025-02-01", end_date="2025-01-01")
    with pytest.raises(ValidationError, match="belongs to task"):
        TaskTemplate(id="t1", name="Gate", segments=(make_segment(task_id="other"),))
