"""Invigilator auto-assignment for exam timetables.

Every exam slot needs exactly one invigilator. Two hard rules apply:
- a staff member never invigilates a subject they teach
- a staff member is never in two slots with the same date+time

Among the staff that satisfy both rules, the least-loaded one is picked, so
duties spread evenly across the roster.

The heuristic is a single greedy pass over the slots in (date, time) order.
Earlier exams get first pick of the staff; a later slot that ends up with no
candidate is marked as a conflict and left for manual editing. Earlier choices
are never revisited.

Conflicts are data, not exceptions: an unassigned slot has an empty
`invigilator_id` and the display name "TBA (Conflict)".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Set

import logging

from .staff_roster import StaffMember


log = logging.getLogger(__name__)

PENDING_LABEL = "TBA"
CONFLICT_LABEL = "TBA (Conflict)"


# ----------------------------
# Data model
# ----------------------------


@dataclass
class ExamSlot:
    """One scheduled examination sitting.

    Only `invigilator_id` / `invigilator_name` are written by the scheduler;
    everything else belongs to whoever created the slot.
    """

    slot_id: str
    date: str  # ISO date, YYYY-MM-DD
    time: str  # HH:MM
    subject: str
    class_name: str
    venue: str = ""
    duration: str = "1 hr 30 mins"
    invigilator_id: str = ""
    invigilator_name: str = PENDING_LABEL


def slot_key(slot: ExamSlot) -> str:
    return f"{slot.date}|{slot.time}"


def is_assigned(slot: ExamSlot) -> bool:
    # The display name is only an echo; the id is the canonical signal.
    return bool(slot.invigilator_id)


def chronological(slots: Iterable[ExamSlot]) -> List[ExamSlot]:
    """Sort slots by (date, time). Stable, so ties keep their input order."""

    return sorted(slots, key=lambda s: (s.date, s.time))


# ----------------------------
# Scheduler
# ----------------------------


def assign_invigilators(slots: List[ExamSlot], staff: Sequence[StaffMember]) -> List[ExamSlot]:
    """Assign one invigilator per slot, in place.

    Args:
        slots: the full exam timetable (all classes). Conflicts are global to a
            staff member's calendar, so never run this per class.
        staff: the active roster. Roster order breaks load ties.

    Returns:
        `slots` itself, with order and membership unchanged.
    """

    load: Dict[str, int] = {s.staff_id: 0 for s in staff}
    busy: Dict[str, Set[str]] = {s.staff_id: set() for s in staff}

    conflicts = 0
    for slot in chronological(slots):
        key = slot_key(slot)

        candidates = [
            s for s in staff
            if not s.teaches(slot.subject) and key not in busy[s.staff_id]
        ]

        if not candidates:
            slot.invigilator_id = ""
            slot.invigilator_name = CONFLICT_LABEL
            conflicts += 1
            log.debug("No invigilator for %s %s (%s, %s)", slot.subject, slot.class_name, slot.date, slot.time)
            continue

        # min() returns the first minimal element, i.e. earliest in roster order.
        chosen = min(candidates, key=lambda s: load[s.staff_id])
        slot.invigilator_id = chosen.staff_id
        slot.invigilator_name = chosen.name
        load[chosen.staff_id] += 1
        busy[chosen.staff_id].add(key)

    log.info(
        "Assigned invigilators for %d slot(s) across %d staff; %d conflict(s)",
        len(slots),
        len(staff),
        conflicts,
    )
    return slots


# ----------------------------
# Metrics / roster views
# ----------------------------


def invigilation_metrics(slots: Sequence[ExamSlot], staff: Sequence[StaffMember]) -> Dict[str, float]:
    """Audit a (possibly hand-edited) schedule against the hard rules.

    Keys:
    - total_slots, assigned, conflicts
    - subject_violations: assigned to someone who teaches the subject
    - double_bookings: extra slots held by a staff member at an already-taken date+time
    - min_load / max_load over the given roster
    """

    by_id = {s.staff_id: s for s in staff}
    loads: Dict[str, int] = {s.staff_id: 0 for s in staff}
    seen: Dict[str, Set[str]] = {}

    assigned = 0
    subject_violations = 0
    double_bookings = 0
    for slot in slots:
        if not is_assigned(slot):
            continue
        assigned += 1
        sid = slot.invigilator_id
        loads[sid] = loads.get(sid, 0) + 1

        member = by_id.get(sid)
        if member is not None and member.teaches(slot.subject):
            subject_violations += 1

        keys = seen.setdefault(sid, set())
        key = slot_key(slot)
        if key in keys:
            double_bookings += 1
        keys.add(key)

    roster_loads = [loads[s.staff_id] for s in staff]
    return {
        "total_slots": float(len(slots)),
        "assigned": float(assigned),
        "conflicts": float(len(slots) - assigned),
        "subject_violations": float(subject_violations),
        "double_bookings": float(double_bookings),
        "min_load": float(min(roster_loads)) if roster_loads else 0.0,
        "max_load": float(max(roster_loads)) if roster_loads else 0.0,
    }


def group_duties_by_invigilator(slots: Iterable[ExamSlot]) -> Dict[str, List[ExamSlot]]:
    """Duty roster: invigilator id -> their slots in (date, time) order.

    Unassigned slots are skipped. Invigilators appear in order of their first
    slot in `slots`.
    """

    duties: Dict[str, List[ExamSlot]] = {}
    for slot in slots:
        if not is_assigned(slot):
            continue
        duties.setdefault(slot.invigilator_id, []).append(slot)

    return {sid: chronological(items) for sid, items in duties.items()}
