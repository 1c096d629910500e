"""
Engine Run State.

Collects everything one engine run derives:
1. Team calendars (day statuses) and the expanded shift instances.
2. Staffing warnings (stale role references).
3. Failures (rejected rotations, segments or ranges) and rest violations.

Nothing here is authoritative: a state is rebuilt from the records on every run.
"""

from datetime import date as date_type
from typing import List, Dict, Any, Optional, Tuple
from collections import defaultdict

from models import DayStatus, ShiftInstance
from .constraints import RestViolation
from .outcome import EngineFailure, StaleReference
from .staffing import StaffingRequirement


class EngineState:
    """
    Accumulates the results of a run and produces reports from them.
    """

    def __init__(self):
        """Initialize empty run state."""
        self.calendar: Dict[str, List[Tuple[date_type, DayStatus]]] = {}
        self.shifts: List[ShiftInstance] = []
        self.staffing: Dict[str, StaffingRequirement] = {}

        # Index for per-task lookups
        self.task_shifts: Dict[str, List[ShiftInstance]] = defaultdict(list)

        self.warnings: List[StaleReference] = []
        self.failures: List[EngineFailure] = []
        self.violations: Dict[str, List[RestViolation]] = {}

    def set_team_statuses(self, team_id: str, rows: List[Tuple[date_type, DayStatus]]) -> None:
        self.calendar[team_id] = rows

    def add_shifts(self, shifts: List[ShiftInstance]) -> None:
        """Record expanded instances, keeping the master list ordered by start."""
        for shift in shifts:
            self.shifts.append(shift)
            self.task_shifts[shift.task_id].append(shift)
        self.shifts.sort(key=lambda s: s.start)

    def set_staffing(self, segment_id: str, requirement: StaffingRequirement, warnings: Tuple[StaleReference, ...] = ()) -> None:
        self.staffing[segment_id] = requirement
        self.warnings.extend(warnings)

    def record_failure(self, failure: EngineFailure) -> None:
        self.failures.append(failure)

    def set_violations(self, violations: Dict[str, List[RestViolation]]) -> None:
        self.violations = violations

    # --- Query Methods ---

    def get_status(self, team_id: str, date: date_type) -> Optional[DayStatus]:
        for day, status in self.calendar.get(team_id, []):
            if day == date:
                return status
        return None

    def get_shifts_for_date(self, date: date_type) -> List[ShiftInstance]:
        """All instances starting on a calendar date."""
        return [s for s in self.shifts if s.start.date() == date]

    def get_shifts_for_segment(self, segment_id: str) -> List[ShiftInstance]:
        return [s for s in self.shifts if s.segment_id == segment_id]

    def get_date_range(self) -> Optional[Tuple[date_type, date_type]]:
        if not self.shifts:
            return None
        return self.shifts[0].start.date(), self.shifts[-1].start.date()

    # --- Reporting Methods ---

    def get_statistics(self) -> Dict[str, Any]:
        """Summary numbers for the run report."""
        on_base_days = defaultdict(int)
        for team_id, rows in self.calendar.items():
            on_base_days[team_id] = sum(1 for _, status in rows if status.is_on_base)

        required_slots = sum(s.requirements.required_people for s in self.shifts)
        total_hours = sum(s.duration.total_seconds() for s in self.shifts) / 3600

        busiest_day = None
        if self.shifts:
            per_day = defaultdict(int)
            for s in self.shifts:
                per_day[s.start.date()] += 1
            busiest_day = max(per_day.items(), key=lambda x: x[1])

        return {
            "teams": len(self.calendar),
            "on_base_days": dict(on_base_days),
            "total_shifts": len(self.shifts),
            "required_person_slots": required_slots,
            "total_shift_hours": round(total_hours, 1),
            "shifts_per_task": {k: len(v) for k, v in self.task_shifts.items()},
            "date_range": self.get_date_range(),
            "busiest_day": busiest_day,
            "stale_role_warnings": len(self.warnings),
            "failures": len(self.failures),
            "rest_violations": sum(len(v) for v in self.violations.values()),
        }

    def get_failure_report(self) -> List[Dict]:
        """What could not be computed, and why."""
        return [
            {
                "type": f.failure_type.value,
                "subject_id": f.subject_id,
                "reason": f.reason
            }
            for f in self.failures
        ]

    def get_warning_report(self) -> List[Dict]:
        """Stale role references grouped by role, for operator review."""
        grouped: Dict[str, Dict[str, Any]] = {}
        for w in self.warnings:
            entry = grouped.setdefault(w.role_id, {"role_id": w.role_id, "segments": [], "headcount": 0})
            if w.subject_id:
                entry["segments"].append(w.subject_id)
            entry["headcount"] += w.count

        report = list(grouped.values())
        report.sort(key=lambda x: x["headcount"], reverse=True)
        return report

    def get_violation_report(self) -> List[Dict]:
        report = []
        for person_id, found in self.violations.items():
            for v in found:
                report.append({
                    "person_id": person_id,
                    "first_segment_id": v.first.segment_id,
                    "second_segment_id": v.second.segment_id,
                    "second_start": v.second.start.isoformat(),
                    "shortfall_hours": v.shortfall.total_seconds() / 3600,
                    "severity": v.severity,
                    "reason": v.reason
                })

        # High severity first, then chronological
        report.sort(key=lambda x: (x["severity"] != "high", x["second_start"]))
        return report
