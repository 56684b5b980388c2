import sys
from pathlib import Path

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def test_exam_schedule_page_imports():
    # Smoke import test (validates no import-time crashes)
    import ui.pages.exam_schedule as _  # noqa: F401


def test_staff_roster_page_imports():
    import ui.pages.staff_roster as _  # noqa: F401


def test_seed_timetable_follows_env_override(tmp_path, monkeypatch):
    from modules.exam_timetable import ExamTimetable, save_exam_timetable_to_json
    from modules.staff_roster import StaffMember
    from ui.state import load_seed_timetable

    seed = tmp_path / "seed.json"
    monkeypatch.setenv("EXAM_TIMETABLE_FILE", str(seed))

    # Missing file => empty timetable
    assert load_seed_timetable() == ExamTimetable()

    save_exam_timetable_to_json(
        ExamTimetable(school_name="Seed School", staff=[StaffMember(staff_id="S001", name="Ama")]),
        str(seed),
    )
    loaded = load_seed_timetable()
    assert loaded.school_name == "Seed School"
    assert [s.staff_id for s in loaded.staff] == ["S001"]


def test_settings_export_is_json_bytes():
    import json

    from modules.exam_timetable import ExamTimetable
    from ui.state import export_settings_bytes

    raw = json.loads(export_settings_bytes(ExamTimetable(school_name="X")).decode("utf-8"))
    assert raw["schoolName"] == "X"
    assert raw["examTimeTable"] == []


def test_staff_id_errors_flag_malformed_and_duplicate_ids():
    from modules.exam_timetable import ExamTimetable
    from modules.staff_roster import StaffMember
    from ui.state import staff_id_errors

    good = ExamTimetable(staff=[StaffMember(staff_id="S001", name="Ama"), StaffMember(staff_id="S002", name="Kofi")])
    assert staff_id_errors(good) == []

    bad = ExamTimetable(
        staff=[
            StaffMember(staff_id="S 1", name="Ama"),
            StaffMember(staff_id="S002", name="Kofi"),
            StaffMember(staff_id="S002", name="Esi"),
        ]
    )
    errors = staff_id_errors(bad)
    assert len(errors) == 2
    assert "Staff ID of Ama" in errors[0]
    assert "duplicates" in errors[1]


def test_import_rejects_settings_with_bad_staff_ids():
    import json

    import pytest

    from ui.state import import_settings_bytes

    payload = {"staffList": [{"id": "x", "name": "Ama"}], "examTimeTable": []}
    with pytest.raises(ValueError, match="Staff ID"):
        import_settings_bytes(json.dumps(payload).encode("utf-8"))

    with pytest.raises(ValueError, match="not valid JSON"):
        import_settings_bytes(b"{not json")
