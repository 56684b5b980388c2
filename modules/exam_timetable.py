"""Exam timetable state + commands.

`ExamTimetable` is the single application-state object for the exam workflow:
the staff roster and every exam slot across all classes. UI code mutates it
only through the command functions below (add / delete / auto-assign).

The JSON layout mirrors the settings object of the school console:

    {
      "schoolName": "...", "termInfo": "...", "academicYear": "...",
      "staffList": [{"id", "name", "subjects", "role", "status", ...}],
      "examTimeTable": [{"id", "date", "time", "duration", "subject",
                         "class", "venue", "invigilatorId", "invigilatorName"}]
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

import json
import logging
import uuid

from .invigilation import (
    PENDING_LABEL,
    ExamSlot,
    assign_invigilators,
    chronological,
    invigilation_metrics,
)
from .staff_roster import StaffMember, active_staff


log = logging.getLogger(__name__)

ASSIGNMENT_NOTICE = "Invigilators assigned based on availability and subject constraints."


# ----------------------------
# State / settings
# ----------------------------


@dataclass(frozen=True)
class ExamSlotDefaults:
    """Defaults used when slots are added from a form."""

    time: str = "08:00"
    duration: str = "1 hr 30 mins"
    max_subjects_per_add: int = 3
    pending_label: str = PENDING_LABEL


@dataclass
class ExamTimetable:
    school_name: str = ""
    term_info: str = ""
    academic_year: str = ""
    staff: List[StaffMember] = field(default_factory=list)
    slots: List[ExamSlot] = field(default_factory=list)


@dataclass(frozen=True)
class AssignmentOutcome:
    notice: str
    metrics: Dict[str, float]


def new_short_id(prefix: str = "EX") -> str:
    """Short random ID for UI-created records, e.g. EX-3f2a9c1b7d4e."""

    return f"{prefix}-{uuid.uuid4().hex[:12]}"


# ----------------------------
# Commands
# ----------------------------


def add_exam_slots(
    timetable: ExamTimetable,
    *,
    date: str,
    subjects: Iterable[str],
    class_name: str,
    time: Optional[str] = None,
    duration: Optional[str] = None,
    venue: Optional[str] = None,
    defaults: ExamSlotDefaults = ExamSlotDefaults(),
    id_factory: Callable[[], str] = new_short_id,
) -> List[ExamSlot]:
    """Create one slot per subject at the same date/time for `class_name`.

    Venue defaults to the class name. New slots start unassigned ("TBA").
    """

    subject_list = [str(s).strip() for s in subjects if str(s).strip()]
    if not date or not str(date).strip():
        raise ValueError("Exam date is required")
    if not subject_list:
        raise ValueError("Select at least one subject")
    if len(subject_list) > int(defaults.max_subjects_per_add):
        raise ValueError(f"At most {defaults.max_subjects_per_add} subjects can be added at once")

    new_slots = [
        ExamSlot(
            slot_id=id_factory(),
            date=str(date).strip(),
            time=str(time or defaults.time).strip(),
            duration=str(duration or defaults.duration),
            subject=sub,
            class_name=class_name,
            venue=venue or class_name,
            invigilator_id="",
            invigilator_name=defaults.pending_label,
        )
        for sub in subject_list
    ]
    timetable.slots.extend(new_slots)
    log.info("Added %d exam slot(s) for %s on %s", len(new_slots), class_name, date)
    return new_slots


def delete_exam_slot(timetable: ExamTimetable, slot_id: str) -> bool:
    before = len(timetable.slots)
    timetable.slots[:] = [s for s in timetable.slots if s.slot_id != slot_id]
    removed = len(timetable.slots) != before
    if removed:
        log.info("Deleted exam slot %s", slot_id)
    return removed


def slots_for_class(timetable: ExamTimetable, class_name: str) -> List[ExamSlot]:
    return chronological(s for s in timetable.slots if s.class_name == class_name)


def exam_classes(timetable: ExamTimetable) -> List[str]:
    return sorted({s.class_name for s in timetable.slots if s.class_name})


def auto_assign_invigilators(timetable: ExamTimetable) -> AssignmentOutcome:
    """Run the scheduler over every slot against the active roster.

    The notice is the same whether or not conflicts occurred; conflicted slots
    are visible inline through their empty invigilator id.
    """

    staff = active_staff(timetable.staff)
    assign_invigilators(timetable.slots, staff)
    metrics = invigilation_metrics(timetable.slots, staff)
    return AssignmentOutcome(notice=ASSIGNMENT_NOTICE, metrics=metrics)


# ----------------------------
# Records / JSON
# ----------------------------


def slot_to_record(slot: ExamSlot) -> Dict[str, str]:
    return {
        "id": slot.slot_id,
        "date": slot.date,
        "time": slot.time,
        "duration": slot.duration,
        "subject": slot.subject,
        "class": slot.class_name,
        "venue": slot.venue,
        "invigilatorId": slot.invigilator_id,
        "invigilatorName": slot.invigilator_name,
    }


def slot_from_record(raw: Dict[str, Any]) -> ExamSlot:
    try:
        return ExamSlot(
            slot_id=str(raw["id"]),
            date=str(raw["date"]),
            time=str(raw["time"]),
            subject=str(raw["subject"]),
            class_name=str(raw.get("class", "")),
            venue=str(raw.get("venue", "")),
            duration=str(raw.get("duration", ExamSlotDefaults().duration)),
            invigilator_id=str(raw.get("invigilatorId") or ""),
            invigilator_name=str(raw.get("invigilatorName") or PENDING_LABEL),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid exam slot record: {raw!r}") from exc


def staff_to_record(member: StaffMember) -> Dict[str, Any]:
    return {
        "id": member.staff_id,
        "name": member.name,
        "subjects": list(member.subjects),
        "role": member.role,
        "status": member.status,
        "contact": member.contact,
        "qualification": member.qualification,
    }


def staff_from_record(raw: Dict[str, Any]) -> StaffMember:
    try:
        return StaffMember(
            staff_id=str(raw["id"]),
            name=str(raw["name"]),
            subjects=tuple(str(s) for s in (raw.get("subjects") or [])),
            role=str(raw.get("role") or "Subject Teacher"),
            status=str(raw.get("status") or "Full Time"),
            contact=str(raw.get("contact") or ""),
            qualification=str(raw.get("qualification") or ""),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid staff record: {raw!r}") from exc


def timetable_to_dict(timetable: ExamTimetable) -> Dict[str, Any]:
    return {
        "schoolName": timetable.school_name,
        "termInfo": timetable.term_info,
        "academicYear": timetable.academic_year,
        "staffList": [staff_to_record(s) for s in timetable.staff],
        "examTimeTable": [slot_to_record(s) for s in timetable.slots],
    }


def timetable_from_dict(raw: Dict[str, Any]) -> ExamTimetable:
    if not isinstance(raw, dict):
        raise ValueError("Exam timetable settings must be a JSON object")
    return ExamTimetable(
        school_name=str(raw.get("schoolName", "")),
        term_info=str(raw.get("termInfo", "")),
        academic_year=str(raw.get("academicYear", "")),
        staff=[staff_from_record(r) for r in raw.get("staffList") or []],
        slots=[slot_from_record(r) for r in raw.get("examTimeTable") or []],
    )


def load_exam_timetable_from_json(path: str) -> ExamTimetable:
    """Load an `ExamTimetable` from a settings JSON file."""

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    timetable = timetable_from_dict(raw)
    log.info("Loaded %d staff and %d exam slots from %s", len(timetable.staff), len(timetable.slots), path)
    return timetable


def save_exam_timetable_to_json(timetable: ExamTimetable, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(timetable_to_dict(timetable), f, indent=2, ensure_ascii=False)
