"""Staff roster page.

Facilitators (teaching staff), non-teaching staff, and the invigilation duty
roster generated from the exam timetable. New staff can be registered here;
only active staff are considered by the invigilator auto-assignment.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modules.exam_timetable import ExamTimetable
from modules.invigilation import group_duties_by_invigilator
from modules.staff_roster import (
    STAFF_ROLES,
    STAFF_STATUSES,
    StaffMember,
    non_teaching_staff,
    teaching_staff,
)
from ui.state import get_timetable
from ui.utils.id_generator import generate_staff_id
from ui.utils.validators import require_non_empty, validate_choice
from utils.timetable_export import duty_roster_df, exporter_for, invigilator_load_df


def _staff_df(staff: list[StaffMember]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "staff_id": s.staff_id,
                "Name": s.name,
                "Role": s.role,
                "Status": s.status,
                "Subjects": ", ".join(s.subjects),
                "Contact": s.contact,
            }
            for s in staff
        ],
        columns=["staff_id", "Name", "Role", "Status", "Subjects", "Contact"],
    )


def _render_add_staff(timetable: ExamTimetable) -> None:
    st.subheader("Register staff")
    with st.form("add_staff", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        name = c1.text_input("Name")
        role = c2.selectbox("Role", options=list(STAFF_ROLES), index=1)
        status = c3.selectbox("Status", options=list(STAFF_STATUSES))
        subjects_csv = st.text_input("Subjects taught (comma-separated)")
        contact = st.text_input("Contact")
        submitted = st.form_submit_button("Add staff")

    if not submitted:
        return

    for ok, msg in (
        require_non_empty(name, "Name"),
        validate_choice(role, "Role", STAFF_ROLES),
        validate_choice(status, "Status", STAFF_STATUSES),
    ):
        if not ok:
            st.error(msg)
            return

    member = StaffMember(
        staff_id=generate_staff_id(s.staff_id for s in timetable.staff),
        name=name.strip(),
        subjects=tuple(x.strip() for x in subjects_csv.split(",") if x.strip()),
        role=role,
        status=status,
        contact=contact.strip(),
    )
    timetable.staff.append(member)
    st.success(f"Registered {member.name} ({member.staff_id}).")


def _render_duty_roster(timetable: ExamTimetable) -> None:
    st.subheader("Invigilation Duty Roster")
    if not timetable.slots:
        st.caption("No examinations have been scheduled yet. Use the Examination Schedule page first.")
        return

    duties = group_duties_by_invigilator(timetable.slots)
    if not duties:
        st.caption("No invigilators assigned yet. Run Auto-Assign on the Examination Schedule page.")
        return

    for sid, items in duties.items():
        with st.expander(f"{items[0].invigilator_name} · Total Duties: {len(items)}"):
            st.dataframe(
                pd.DataFrame(
                    [{"Date": s.date, "Time": s.time, "Subject": s.subject, "Class": s.class_name, "Venue": s.venue} for s in items]
                ),
                use_container_width=True,
                hide_index=True,
            )

    roster = duty_roster_df(timetable.slots)
    exporter = exporter_for("xlsx")
    st.download_button(
        "Download duty roster (.xlsx)",
        data=exporter.export(roster, title="Invigilation Roster"),
        file_name=f"Invigilation_Roster{exporter.filename_suffix}",
        mime=exporter.mime,
    )

    st.subheader("Invigilator load")
    load_df = invigilator_load_df(timetable.slots, timetable.staff)
    st.bar_chart(load_df.set_index("name")["Duties"])


def main() -> None:
    st.title("Staff Roster")
    timetable = get_timetable()

    tab_teach, tab_other, tab_duty = st.tabs(["Facilitators", "Non-Teaching", "Invigilators"])
    with tab_teach:
        st.dataframe(_staff_df(teaching_staff(timetable.staff)), use_container_width=True, hide_index=True)
    with tab_other:
        st.dataframe(_staff_df(non_teaching_staff(timetable.staff)), use_container_width=True, hide_index=True)
    with tab_duty:
        _render_duty_roster(timetable)

    st.divider()
    _render_add_staff(timetable)


if __name__ == "__main__":
    main()
