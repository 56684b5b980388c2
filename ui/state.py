"""Session-held exam timetable for the Streamlit UI.

There is no database: the whole settings object lives in `st.session_state`
for the browser session. It is seeded from a JSON settings file so the demo
starts with data; users can download the edited settings at any time.

The seed file is `EXAM_TIMETABLE_FILE` if set, else
`data/sample_exam_timetable.json` under the project root.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List

import streamlit as st

from modules.exam_timetable import (
    ExamTimetable,
    load_exam_timetable_from_json,
    timetable_from_dict,
    timetable_to_dict,
)
from ui.utils.validators import validate_id, validate_unique


log = logging.getLogger(__name__)

STATE_KEY = "exam_timetable"
DEFAULT_SEED_FILENAME = "sample_exam_timetable.json"


def default_seed_path() -> Path:
    override = os.getenv("EXAM_TIMETABLE_FILE")
    if override:
        return Path(override).expanduser().resolve()
    return (Path(__file__).resolve().parents[1] / "data" / DEFAULT_SEED_FILENAME).resolve()


def load_seed_timetable(path: Path | None = None) -> ExamTimetable:
    """Load the seed settings file; an empty timetable if it does not exist."""

    seed = path or default_seed_path()
    if not seed.exists():
        log.info("No seed settings at %s; starting empty", seed)
        return ExamTimetable()
    return load_exam_timetable_from_json(str(seed))


def get_timetable() -> ExamTimetable:
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = load_seed_timetable()
    return st.session_state[STATE_KEY]


def replace_timetable(timetable: ExamTimetable) -> None:
    st.session_state[STATE_KEY] = timetable


def staff_id_errors(timetable: ExamTimetable) -> List[str]:
    """Check roster ids in an imported settings file (format + uniqueness)."""

    errors = []
    for member in timetable.staff:
        ok, msg = validate_id(member.staff_id, f"Staff ID of {member.name or '(unnamed)'}")
        if not ok:
            errors.append(msg)
    ok, msg = validate_unique((m.staff_id for m in timetable.staff), "Staff IDs")
    if not ok:
        errors.append(msg)
    return errors


def import_settings_bytes(data: bytes) -> ExamTimetable:
    """Parse an uploaded settings JSON and make it the current timetable."""

    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Settings file is not valid JSON: {exc}") from exc
    timetable = timetable_from_dict(raw)
    errors = staff_id_errors(timetable)
    if errors:
        raise ValueError("; ".join(errors))
    replace_timetable(timetable)
    return timetable


def export_settings_bytes(timetable: ExamTimetable) -> bytes:
    return json.dumps(timetable_to_dict(timetable), indent=2, ensure_ascii=False).encode("utf-8")
