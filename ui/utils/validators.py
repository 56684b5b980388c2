"""Validation helpers for Streamlit forms."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable, Tuple


_ID_RE = re.compile(r"^[A-Za-z0-9_-]{2,32}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: str, field: str) -> Tuple[bool, str]:
    if not value or not value.strip():
        return False, f"{field} cannot be empty"
    return True, ""


def validate_id(value: str, field: str) -> Tuple[bool, str]:
    ok, msg = require_non_empty(value, field)
    if not ok:
        return ok, msg
    if not _ID_RE.match(value.strip()):
        return False, f"{field} must be 2-32 chars (letters/numbers/_/-)"
    return True, ""


def validate_unique(values: Iterable[str], field: str) -> Tuple[bool, str]:
    vals = [v.strip() for v in values if v and v.strip()]
    if len(vals) != len(set(vals)):
        return False, f"{field} contains duplicates"
    return True, ""


def validate_choice(value: str, field: str, allowed: Iterable[str]) -> Tuple[bool, str]:
    ok, msg = require_non_empty(value, field)
    if not ok:
        return ok, msg
    allowed_set = {str(x) for x in allowed}
    if str(value) not in allowed_set:
        return False, f"{field} must be one of: {', '.join(sorted(allowed_set))}"
    return True, ""


def validate_iso_date(value: str | date, field: str) -> Tuple[bool, str]:
    """Accept `date` objects (from st.date_input) or YYYY-MM-DD strings."""

    if isinstance(value, date):
        return True, ""
    ok, msg = require_non_empty(value, field)
    if not ok:
        return ok, msg
    try:
        datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        return False, f"{field} must be a date in YYYY-MM-DD format"
    return True, ""


def validate_clock_time(value: str, field: str) -> Tuple[bool, str]:
    """Exam times are zero-padded 24h HH:MM so they sort lexicographically."""

    ok, msg = require_non_empty(value, field)
    if not ok:
        return ok, msg
    if not _TIME_RE.match(value.strip()):
        return False, f"{field} must be HH:MM (24-hour, e.g. 08:00)"
    return True, ""


def validate_subject_selection(subjects: Iterable[str], *, max_subjects: int = 3) -> Tuple[bool, str]:
    chosen = [s for s in subjects if s and str(s).strip()]
    if not chosen:
        return False, "Select at least one subject"
    if len(chosen) > int(max_subjects):
        return False, f"Select at most {int(max_subjects)} subjects per slot"
    ok, msg = validate_unique(chosen, "Subjects")
    if not ok:
        return ok, msg
    return True, ""
