import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ui.utils.id_generator import generate_staff_id
from ui.utils.validators import (
    validate_choice,
    validate_clock_time,
    validate_id,
    validate_iso_date,
    validate_subject_selection,
)


def test_clock_time_must_be_zero_padded_24h():
    assert validate_clock_time("08:00", "Time")[0]
    assert validate_clock_time("23:59", "Time")[0]
    assert not validate_clock_time("8:00", "Time")[0]
    assert not validate_clock_time("24:00", "Time")[0]
    assert not validate_clock_time("", "Time")[0]


def test_iso_date():
    assert validate_iso_date(date(2025, 3, 24), "Date")[0]
    assert validate_iso_date("2025-03-24", "Date")[0]
    ok, msg = validate_iso_date("24/03/2025", "Date")
    assert not ok
    assert "YYYY-MM-DD" in msg


def test_subject_selection_limits():
    assert validate_subject_selection(["Maths"])[0]
    assert not validate_subject_selection([])[0]
    assert not validate_subject_selection(["A", "B", "C", "D"])[0]
    assert not validate_subject_selection(["A", "A"])[0]


def test_id_and_choice():
    assert validate_id("S001", "Staff ID")[0]
    assert not validate_id("S 1", "Staff ID")[0]
    assert validate_choice("Full Time", "Status", ["Full Time", "Part Time"])[0]
    assert not validate_choice("Retired", "Status", ["Full Time", "Part Time"])[0]


def test_staff_ids_are_sequential():
    assert generate_staff_id([]) == "S001"
    assert generate_staff_id(["S001", "S007", "X123"]) == "S008"

