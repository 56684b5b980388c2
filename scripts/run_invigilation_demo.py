"""Demo runner: auto-assign invigilators for the sample exam timetable.

Usage:
    python scripts/run_invigilation_demo.py [settings.json] [--out schedule.json]

"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Ensure project root is on PYTHONPATH when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modules.exam_timetable import (
    auto_assign_invigilators,
    load_exam_timetable_from_json,
    save_exam_timetable_to_json,
)
from utils.timetable_export import duty_roster_df, exam_schedule_df, invigilator_load_df


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Auto-assign exam invigilators")
    parser.add_argument(
        "settings",
        nargs="?",
        default=str(ROOT / "data" / "sample_exam_timetable.json"),
        help="Settings JSON with staffList + examTimeTable (default: sample data)",
    )
    parser.add_argument("--out", help="Write the updated settings JSON here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each conflict")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        timetable = load_exam_timetable_from_json(args.settings)
    except (OSError, ValueError) as exc:
        print(f"Could not load settings: {exc}", file=sys.stderr)
        return 1

    outcome = auto_assign_invigilators(timetable)

    print("\n=== Exam Schedule ===")
    print(exam_schedule_df(timetable.slots).to_string(index=False))

    print("\n=== Invigilator Load ===")
    print(invigilator_load_df(timetable.slots, timetable.staff).to_string(index=False))

    print("\n=== Duty Roster ===")
    print(duty_roster_df(timetable.slots).to_string(index=False))

    print("\n=== Metrics ===")
    for k, v in outcome.metrics.items():
        print(f"{k}: {v}")

    print(f"\n{outcome.notice}")

    if args.out:
        save_exam_timetable_to_json(timetable, args.out)
        print(f"Wrote: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
