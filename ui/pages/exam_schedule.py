"""Examination Schedule page.

Add exam slots per class, then auto-assign invigilators across the whole
timetable (all classes) from the active staff roster. Conflicted slots stay
visible in the table as "TBA (Conflict)" for manual follow-up.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import streamlit as st

# Ensure project root is on PYTHONPATH when Streamlit runs pages
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modules.exam_timetable import (
    ExamSlotDefaults,
    ExamTimetable,
    add_exam_slots,
    auto_assign_invigilators,
    delete_exam_slot,
    exam_classes,
    slots_for_class,
)
from modules.invigilation import is_assigned
from ui.state import get_timetable
from ui.utils.validators import (
    require_non_empty,
    validate_clock_time,
    validate_iso_date,
    validate_subject_selection,
)
from utils.timetable_export import (
    EXPORTERS,
    exam_reports_workbook_bytes,
    exam_reports_zip_bytes,
    df_to_markdown,
    exam_schedule_df,
    exporter_for,
)


DEFAULTS = ExamSlotDefaults()


def _known_subjects(timetable: ExamTimetable) -> list[str]:
    subjects = {sub for m in timetable.staff for sub in m.subjects}
    subjects |= {s.subject for s in timetable.slots}
    return sorted(x for x in subjects if x)


def _render_add_form(timetable: ExamTimetable, class_name: str) -> None:
    st.subheader("Add examination slot")
    c1, c2, c3, c4 = st.columns(4)
    exam_date = c1.date_input("Date", value=date.today(), key="exam_add_date")
    exam_time = c2.text_input("Start time", value=DEFAULTS.time, key="exam_add_time")
    duration = c3.text_input("Duration", value=DEFAULTS.duration, key="exam_add_duration")
    venue = c4.text_input("Venue", value=class_name, key="exam_add_venue")

    subjects = st.multiselect(
        f"Subjects (max {DEFAULTS.max_subjects_per_add})",
        options=_known_subjects(timetable),
        key="exam_add_subjects",
    )
    extra = st.text_input("Other subject (optional)", key="exam_add_extra_subject")
    if extra.strip():
        subjects = [*subjects, extra.strip()]

    if not st.button("Add to schedule", type="primary"):
        return

    for ok, msg in (
        require_non_empty(class_name, "Class"),
        validate_iso_date(exam_date, "Date"),
        validate_clock_time(exam_time, "Start time"),
        validate_subject_selection(subjects, max_subjects=DEFAULTS.max_subjects_per_add),
    ):
        if not ok:
            st.error(msg)
            return

    new_slots = add_exam_slots(
        timetable,
        date=exam_date.isoformat(),
        time=exam_time.strip(),
        duration=duration,
        venue=venue.strip() or None,
        subjects=subjects,
        class_name=class_name,
        defaults=DEFAULTS,
    )
    st.success(f"Added {len(new_slots)} slot(s) for {class_name}.")


def _render_class_table(timetable: ExamTimetable, class_name: str) -> None:
    schedule = slots_for_class(timetable, class_name)
    st.subheader(f"Examination Schedule ({class_name})")
    if not schedule:
        st.caption("No examination slots scheduled.")
        return

    df = exam_schedule_df(schedule)
    df["Status"] = ["Assigned" if is_assigned(s) else "Pending" for s in schedule]
    st.dataframe(df, use_container_width=True, hide_index=True)

    labels = {s.slot_id: f"{s.date} {s.time} · {s.subject} · {s.invigilator_name}" for s in schedule}
    c1, c2 = st.columns([3, 1])
    to_delete = c1.selectbox("Remove slot", options=list(labels), format_func=labels.get, key="exam_delete_choice")
    if c2.button("Delete slot") and to_delete:
        delete_exam_slot(timetable, to_delete)
        st.rerun()

    c1, c2 = st.columns([1, 3])
    kind = c1.selectbox("Format", options=sorted(EXPORTERS), key="exam_export_kind")
    exporter = exporter_for(kind)
    title = f"Exam Schedule {class_name}"
    c2.download_button(
        f"Download {class_name} schedule",
        data=exporter.export(exam_schedule_df(schedule), title=title),
        file_name=f"Exam_Schedule_{class_name}{exporter.filename_suffix}",
        mime=exporter.mime,
    )


def main() -> None:
    st.title("Examination Schedule")
    timetable = get_timetable()

    classes = exam_classes(timetable)
    c1, c2 = st.columns([2, 2])
    picked = c1.selectbox("Class", options=classes + ["(new class)"], key="exam_class_pick") if classes else "(new class)"
    class_name = picked
    if picked == "(new class)":
        class_name = c2.text_input("New class name", key="exam_new_class").strip()

    st.divider()
    if st.button("Auto-Assign Invigilators"):
        outcome = auto_assign_invigilators(timetable)
        st.info(outcome.notice)
        m = outcome.metrics
        m1, m2, m3 = st.columns(3)
        m1.metric("Slots", int(m["total_slots"]))
        m2.metric("Assigned", int(m["assigned"]))
        m3.metric("Conflicts", int(m["conflicts"]))

    if class_name:
        _render_add_form(timetable, class_name)
        st.divider()
        _render_class_table(timetable, class_name)
    else:
        st.warning("Pick a class or enter a new class name to add slots.")

    st.divider()
    st.subheader("All classes")
    if not timetable.slots:
        st.caption("No examination slots scheduled.")
        return

    full_df = exam_schedule_df(timetable.slots)
    st.dataframe(full_df, use_container_width=True, hide_index=True)
    st.download_button(
        "Download exam reports workbook (.xlsx)",
        data=exam_reports_workbook_bytes(timetable),
        file_name="exam_reports.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    st.download_button(
        "Download ALL outputs (.zip)",
        data=exam_reports_zip_bytes(timetable),
        file_name="exam_reports_bundle.zip",
        mime="application/zip",
    )
    if st.checkbox("Show as Markdown", value=False):
        st.code(df_to_markdown(full_df), language="markdown")


if __name__ == "__main__":
    main()
