import json
import re
import sys
from pathlib import Path

import pytest

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modules.exam_timetable import (
    ASSIGNMENT_NOTICE,
    ExamSlotDefaults,
    ExamTimetable,
    add_exam_slots,
    auto_assign_invigilators,
    delete_exam_slot,
    exam_classes,
    load_exam_timetable_from_json,
    new_short_id,
    save_exam_timetable_to_json,
    slot_from_record,
    slot_to_record,
    slots_for_class,
    timetable_from_dict,
)
from modules.invigilation import CONFLICT_LABEL, PENDING_LABEL
from modules.staff_roster import StaffMember


def _timetable():
    return ExamTimetable(
        school_name="Test School",
        staff=[
            StaffMember(staff_id="S001", name="Ama", subjects=("Mathematics",)),
            StaffMember(staff_id="S002", name="Kofi", subjects=("English",)),
            StaffMember(staff_id="S003", name="Kwame", subjects=(), status="Not Active"),
        ],
    )


def test_add_exam_slots_creates_one_slot_per_subject_with_defaults():
    t = _timetable()

    new = add_exam_slots(t, date="2025-03-24", subjects=["Mathematics", "English"], class_name="JHS 1")

    assert len(new) == 2
    assert t.slots == new
    assert {s.subject for s in new} == {"Mathematics", "English"}
    for s in new:
        assert s.time == "08:00"
        assert s.duration == "1 hr 30 mins"
        assert s.venue == "JHS 1"
        assert s.invigilator_id == ""
        assert s.invigilator_name == PENDING_LABEL
    assert len({s.slot_id for s in new}) == 2
    for s in new:
        assert re.fullmatch(r"EX-[0-9a-f]{12}", s.slot_id)


def test_add_exam_slots_uses_given_values_and_id_factory():
    t = _timetable()
    ids = iter(["EX-a", "EX-b"])

    new = add_exam_slots(
        t,
        date="2025-03-25",
        time="10:30",
        duration="2 hrs",
        venue="Hall",
        subjects=["Science"],
        class_name="JHS 2",
        id_factory=lambda: next(ids),
    )

    assert new[0].slot_id == "EX-a"
    assert (new[0].time, new[0].duration, new[0].venue) == ("10:30", "2 hrs", "Hall")


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"date": "", "subjects": ["Maths"]}, "date"),
        ({"date": "2025-03-24", "subjects": []}, "subject"),
        ({"date": "2025-03-24", "subjects": ["A", "B", "C", "D"]}, "At most 3"),
    ],
)
def test_add_exam_slots_rejects_bad_input(kwargs, message):
    t = _timetable()
    with pytest.raises(ValueError, match=message):
        add_exam_slots(t, class_name="JHS 1", **kwargs)
    assert t.slots == []


def test_max_subjects_per_add_is_configurable():
    t = _timetable()
    defaults = ExamSlotDefaults(max_subjects_per_add=1)
    with pytest.raises(ValueError):
        add_exam_slots(t, date="2025-03-24", subjects=["A", "B"], class_name="JHS 1", defaults=defaults)


def test_delete_exam_slot_keeps_list_identity():
    t = _timetable()
    slots_ref = t.slots
    new = add_exam_slots(t, date="2025-03-24", subjects=["A", "B"], class_name="JHS 1")

    assert delete_exam_slot(t, new[0].slot_id) is True
    assert delete_exam_slot(t, "missing") is False
    assert t.slots is slots_ref
    assert [s.slot_id for s in t.slots] == [new[1].slot_id]


def test_class_views():
    t = _timetable()
    add_exam_slots(t, date="2025-03-25", subjects=["A"], class_name="JHS 2")
    add_exam_slots(t, date="2025-03-24", time="10:00", subjects=["B"], class_name="JHS 1")
    add_exam_slots(t, date="2025-03-24", time="08:00", subjects=["C"], class_name="JHS 1")

    assert exam_classes(t) == ["JHS 1", "JHS 2"]
    assert [s.subject for s in slots_for_class(t, "JHS 1")] == ["C", "B"]


def test_auto_assign_runs_across_classes_with_active_staff_only():
    t = _timetable()
    add_exam_slots(t, date="2025-03-24", subjects=["Mathematics"], class_name="JHS 1")
    add_exam_slots(t, date="2025-03-24", subjects=["History"], class_name="JHS 2")
    add_exam_slots(t, date="2025-03-24", subjects=["Science"], class_name="JHS 3")

    outcome = auto_assign_invigilators(t)

    assert outcome.notice == ASSIGNMENT_NOTICE
    ids = [s.invigilator_id for s in t.slots]
    # Same date/time for every class: two active staff cover two slots, S003 is inactive.
    assert ids == ["S002", "S001", ""]
    assert t.slots[2].invigilator_name == CONFLICT_LABEL
    assert outcome.metrics["conflicts"] == 1.0
    assert outcome.metrics["subject_violations"] == 0.0


def test_auto_assign_notice_is_the_same_for_empty_roster():
    t = ExamTimetable()
    add_exam_slots(t, date="2025-03-24", subjects=["A"], class_name="JHS 1")

    outcome = auto_assign_invigilators(t)

    assert outcome.notice == ASSIGNMENT_NOTICE
    assert t.slots[0].invigilator_name == CONFLICT_LABEL


def test_slot_record_uses_flat_settings_keys():
    t = _timetable()
    slot = add_exam_slots(t, date="2025-03-24", subjects=["A"], class_name="JHS 1")[0]

    record = slot_to_record(slot)

    assert set(record) == {
        "id", "date", "time", "duration", "subject", "class", "venue", "invigilatorId", "invigilatorName",
    }
    assert slot_from_record(record) == slot


def test_slot_from_record_rejects_missing_fields():
    with pytest.raises(ValueError, match="Invalid exam slot record"):
        slot_from_record({"id": "x", "date": "2025-03-24"})


def test_timetable_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        timetable_from_dict(["not", "a", "dict"])


def test_save_and_load_json_roundtrip(tmp_path):
    t = _timetable()
    add_exam_slots(t, date="2025-03-24", subjects=["English"], class_name="JHS 1")
    auto_assign_invigilators(t)

    path = tmp_path / "settings.json"
    save_exam_timetable_to_json(t, str(path))
    raw = json.loads(path.read_text(encoding="utf-8"))
    loaded = load_exam_timetable_from_json(str(path))

    assert raw["examTimeTable"][0]["invigilatorId"] == "S001"
    assert loaded == t


def test_sample_settings_file_has_no_rule_violations():
    t = load_exam_timetable_from_json(str(ROOT / "data" / "sample_exam_timetable.json"))

    outcome = auto_assign_invigilators(t)

    assert outcome.metrics["total_slots"] == 10.0
    assert outcome.metrics["subject_violations"] == 0.0
    assert outcome.metrics["double_bookings"] == 0.0
    assert all(s.invigilator_id != "S006" for s in t.slots)


def test_short_id_takes_a_prefix():
    assert re.fullmatch(r"ST-[0-9a-f]{12}", new_short_id("ST"))
    assert new_short_id() != new_short_id()
