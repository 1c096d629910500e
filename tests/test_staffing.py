import pytest

from conftest import make_segment
from models import Role, RoleComposition
from scheduler.outcome import FailureType
from scheduler.staffing import StaffingResolver


@pytest.fixture
def resolver():
    return StaffingResolver()


def test_stale_role_still_counts(resolver):
    comp = RoleComposition([{"role_id": "roleA", "count": 2}, {"role_id": "roleB", "count": 3}])
    outcome = resolver.resolve(comp, {"roleA"})

    assert outcome.ok
    assert outcome.value.required == 5
    assert outcome.value.by_role == {"roleA": 2, "roleB": 3}
    assert outcome.value.stale_roles == frozenset({"roleB"})
    assert [(w.role_id, w.count) for w in outcome.warnings] == [("roleB", 3)]


def test_clean_composition_has_no_warnings(resolver, roles):
    comp = RoleComposition([{"role_id": "role_guard", "count": 2}])
    outcome = resolver.resolve(comp, roles)
    assert outcome.value.required == 2
    assert outcome.value.stale_roles == frozenset()
    assert outcome.warnings == ()


@pytest.mark.parametrize("catalog", [
    ["role_guard"],
    {"role_guard": "Guard"},
    [Role(id="role_guard", name="Guard")],
])
def test_catalog_shapes(resolver, catalog):
    comp = RoleComposition([{"role_id": "role_guard", "count": 1}, {"role_id": "gone", "count": 1}])
    assert resolver.resolve(comp, catalog).value.stale_roles == frozenset({"gone"})


def test_empty_composition(resolver):
    outcome = resolver.resolve(RoleComposition(), [])
    assert outcome.value.required == 0
    assert outcome.value.by_role == {}


def test_resolve_segment_tags_warnings_with_segment(resolver):
    seg = make_segment(id="seg_x", role_composition=[{"role_id": "deleted", "count": 1}])
    outcome = resolver.resolve_segment(seg, [])
    assert outcome.warnings[0].subject_id == "seg_x"
    assert "deleted" in outcome.warnings[0].reason


def test_estimate_for_continuous_segment(resolver):
    # 2h on / 6h rest around the clock, one person per shift -> 4 people
    seg = make_segment(start_time="00:00", duration_hours=2, min_rest_hours_after=6, is_repeat=True,
                       role_composition=[{"role_id": "role_guard", "count": 1}])
    estimate = resolver.estimate_headcount([seg]).unwrap()

    assert estimate.daily_man_hours == 24
    assert estimate.work_ratio == 0.25
    assert estimate.staff_needed == 4


def test_estimate_for_daily_segments(resolver):
    morning = make_segment(id="m", duration_hours=8, min_rest_hours_after=8)   # 2 guards
    evening = make_segment(id="e", start_time="16:00", duration_hours=8, min_rest_hours_after=8)
    estimate = resolver.estimate_headcount([morning, evening]).unwrap()

    # 32 man-hours, ratio 0.5 -> 32 / 12
    assert estimate.daily_man_hours == 32
    assert estimate.work_ratio == 0.5
    assert estimate.staff_needed == 3


def test_estimate_needs_daily_load(resolver):
    assert resolver.estimate_headcount([]).failure.failure_type == FailureType.INVALID_CONFIGURATION

    weekly = make_segment(frequency="Weekly", days_of_week=["monday"])
    outcome = resolver.estimate_headcount([weekly])
    assert not outcome.ok
    assert outcome.failure.failure_type == FailureType.INVALID_CONFIGURATION


def test_single_string_catalog_is_rejected(resolver):
    comp = RoleComposition([{"role_id": "role_guard", "count": 1}])
    with pytest.raises(TypeError):
        resolver.resolve(comp, "role_guard")
