"""Exam scheduling modules (staff roster, invigilation, exam timetable state)."""

from .staff_roster import (
	StaffMember,
	active_staff,
	find_staff,
	non_teaching_staff,
	teaching_staff,
)

from .invigilation import (
	CONFLICT_LABEL,
	PENDING_LABEL,
	ExamSlot,
	assign_invigilators,
	group_duties_by_invigilator,
	invigilation_metrics,
	is_assigned,
	slot_key,
)

from .exam_timetable import (
	ASSIGNMENT_NOTICE,
	AssignmentOutcome,
	ExamSlotDefaults,
	ExamTimetable,
	add_exam_slots,
	auto_assign_invigilators,
	delete_exam_slot,
	exam_classes,
	load_exam_timetable_from_json,
	save_exam_timetable_to_json,
	slots_for_class,
)

__all__ = [
	"StaffMember",
	"active_staff",
	"find_staff",
	"non_teaching_staff",
	"teaching_staff",
	"CONFLICT_LABEL",
	"PENDING_LABEL",
	"ExamSlot",
	"assign_invigilators",
	"group_duties_by_invigilator",
	"invigilation_metrics",
	"is_assigned",
	"slot_key",
	"ASSIGNMENT_NOTICE",
	"AssignmentOutcome",
	"ExamSlotDefaults",
	"ExamTimetable",
	"add_exam_slots",
	"auto_assign_invigilators",
	"delete_exam_slot",
	"exam_classes",
	"load_exam_timetable_from_json",
	"save_exam_timetable_to_json",
	"slots_for_class",
]
