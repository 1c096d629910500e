"""
Main Execution Script for the Rotation & Shift Scheduling Engine.

Loads rotation, task and role records from a JSON file, runs the engine
over a window and exports calendars, shifts and findings for the frontend.
"""

import os
import sys
import argparse
import logging
from datetime import date
import json

from pydantic import ValidationError

# Add current directory to path so imports work when run from elsewhere
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from scheduler.engine import RotaEngine
from models import Role, RotationDefinition, TaskTemplate, ShiftInstance

logger = logging.getLogger("Main")

# --- CONFIGURATION ---
INPUT_FILENAME = os.environ.get("ROTA_INPUT_FILE", "rota_data.json")
OUTPUT_FILENAME = os.environ.get("ROTA_OUTPUT_FILE", "schedule_export.json")
WINDOW_DAYS = int(os.environ.get("ROTA_WINDOW_DAYS", "30"))
LOG_LEVEL = os.environ.get("ROTA_LOG_LEVEL", "INFO")
# ---------------------


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def load_records(filename: str):
    """
    Load JSON records and rebuild the pydantic models.
    Returns None when the file is missing or malformed.
    """
    try:
        with open(filename, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error(f"Input file {filename} not found.")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Input file {filename} is not valid JSON: {e}")
        return None

    try:
        roles = [Role.model_validate(item) for item in data.get('roles', [])]
        rotations = [RotationDefinition.model_validate(item) for item in data.get('rotations', [])]
        tasks = [TaskTemplate.model_validate(item) for item in data.get('tasks', [])]
        assignments = {
            person_id: [ShiftInstance.model_validate(item) for item in shifts]
            for person_id, shifts in data.get('assignments', {}).items()
        }
    except ValidationError as e:
        logger.error(f"Invalid record in {filename}:\n{e}")
        return None

    logger.info(
        f"Loaded {len(rotations)} rotations, {len(tasks)} tasks, "
        f"{len(roles)} roles, assignments for {len(assignments)} people."
    )
    return {
        "roles": roles,
        "rotations": rotations,
        "tasks": tasks,
        "assignments": assignments,
    }


def export_schedule_data(state, filename: str) -> dict:
    """
    Serializes the engine state into a JSON format for the frontend.
    """
    logger.info(f"Exporting schedule data to {filename}...")

    data = {
        "calendar": {},
        "shifts": {},
        "violations": state.get_violation_report(),
        "warnings": state.get_warning_report(),
        "failures": state.get_failure_report(),
        "statistics": {},
    }

    # 1. Calendar (team -> date -> status)
    for team_id, rows in state.calendar.items():
        data["calendar"][team_id] = {day.isoformat(): status.value for day, status in rows}

    # 2. Shifts (grouped by start date)
    for shift in state.shifts:
        date_key = shift.start.date().isoformat()
        data["shifts"].setdefault(date_key, []).append(shift.model_dump(mode='json'))

    # 3. Statistics (dates made JSON friendly)
    stats = state.get_statistics()
    if stats["date_range"]:
        stats["date_range"] = [d.isoformat() for d in stats["date_range"]]
    if stats["busiest_day"]:
        day, count = stats["busiest_day"]
        stats["busiest_day"] = {"date": day.isoformat(), "shifts": count}
    data["statistics"] = stats

    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info("Schedule data exported.")
    return data


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Expand rotations and shift segments for a window.")
    parser.add_argument("--input", default=INPUT_FILENAME, help="JSON file with roles, rotations, tasks, assignments")
    parser.add_argument("--output", default=OUTPUT_FILENAME, help="Where to write the export")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="First day of the window (YYYY-MM-DD, default today)")
    parser.add_argument("--days", type=int, default=WINDOW_DAYS, help="Window length in days")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    records = load_records(args.input)
    if records is None:
        return 1

    engine = RotaEngine(
        rotations=records["rotations"],
        tasks=records["tasks"],
        roles=records["roles"],
        start_date=args.start or date.today(),
        duration_days=args.days
    )
    state = engine.run(records["assignments"])

    stats = state.get_statistics()
    print("\n" + "=" * 50)
    print("ENGINE RUN REPORT")
    print("=" * 50)
    print(stats)

    for fail in state.get_failure_report():
        print(f"[{fail['type']}] {fail['subject_id']}: {fail['reason']}")
    for warn in state.get_warning_report():
        print(f"[StaleRole] {warn['role_id']} used by {', '.join(warn['segments'])}")

    export_schedule_data(state, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
