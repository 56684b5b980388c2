"""Staff roster records and roster views.

The roster is owned by the caller (settings object / UI state). Scheduling code
only reads it: `active_staff` is what gets fed to the invigilator scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


STAFF_ROLES: Tuple[str, ...] = (
    "Class Teacher",
    "Subject Teacher",
    "Both",
    "Headteacher",
    "Supervisory",
    "Facilitator",
    "Facilitator Assistant",
    "Caregiver",
    "Guest",
)

STAFF_STATUSES: Tuple[str, ...] = (
    "Full Time",
    "Part Time",
    "Observer Active",
    "Observer Inactive",
    "Not Active",
)

INACTIVE_STATUSES = frozenset({"Not Active", "Observer Inactive"})

# Roles listed as teaching staff even when no subjects are recorded yet.
TEACHING_ROLES = frozenset({"Facilitator", "Class Teacher", "Headteacher"})


@dataclass(frozen=True)
class StaffMember:
    staff_id: str
    name: str
    subjects: Tuple[str, ...] = ()
    role: str = "Subject Teacher"
    status: str = "Full Time"
    contact: str = ""
    qualification: str = ""

    def teaches(self, subject: str) -> bool:
        return subject in self.subjects


def is_active(member: StaffMember) -> bool:
    return member.status not in INACTIVE_STATUSES


def active_staff(staff: Iterable[StaffMember]) -> List[StaffMember]:
    """Return roster members available for duties, keeping roster order."""

    return [s for s in staff if is_active(s)]


def is_teaching(member: StaffMember) -> bool:
    return member.role in TEACHING_ROLES or len(member.subjects) > 0


def teaching_staff(staff: Iterable[StaffMember]) -> List[StaffMember]:
    return [s for s in staff if is_teaching(s)]


def non_teaching_staff(staff: Iterable[StaffMember]) -> List[StaffMember]:
    return [s for s in staff if not is_teaching(s)]


def find_staff(staff: Iterable[StaffMember], staff_id: str) -> Optional[StaffMember]:
    for s in staff:
        if s.staff_id == staff_id:
            return s
    return None
