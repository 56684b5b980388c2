"""Main Streamlit app entrypoint.

Run:
    streamlit run ui/app.py

"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Ensure project root is on PYTHONPATH when Streamlit runs this file
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modules.invigilation import invigilation_metrics
from modules.staff_roster import active_staff
from modules.exam_timetable import exam_classes
from ui.state import export_settings_bytes, get_timetable, import_settings_bytes


st.set_page_config(
    page_title="School Exam Console",
    page_icon="📝",
    layout="wide",
)


def _inject_css() -> None:
    st.markdown(
        """
        <style>
        .block-container { padding-top: 1.2rem; }
        div[data-testid="stMetric"] { background: #0b1220; border: 1px solid rgba(255,255,255,0.08); padding: 12px; border-radius: 12px; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def main() -> None:
    _inject_css()

    st.sidebar.title("Exam Console")
    st.sidebar.caption("Exam timetable & invigilation")

    timetable = get_timetable()

    st.title("Dashboard")
    if timetable.school_name:
        st.caption(f"{timetable.school_name} · {timetable.term_info} · {timetable.academic_year}")
    st.write(
        "Use the sidebar pages to add examination slots, auto-assign invigilators and "
        "review the staff roster and invigilation duty roster."
    )

    staff = active_staff(timetable.staff)
    metrics = invigilation_metrics(timetable.slots, staff)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Active staff", len(staff))
    c2.metric("Exam slots", int(metrics["total_slots"]))
    c3.metric("Classes", len(exam_classes(timetable)))
    c4.metric("Unassigned slots", int(metrics["conflicts"]))

    st.divider()
    st.subheader("Settings file")
    uploaded = st.file_uploader("Load settings (.json)", type=["json"])
    if uploaded is not None and st.button("Replace current settings"):
        try:
            timetable = import_settings_bytes(uploaded.getvalue())
        except ValueError as exc:
            st.error(str(exc))
        else:
            st.success(f"Loaded {len(timetable.staff)} staff and {len(timetable.slots)} exam slots.")

    st.download_button(
        "Download current settings (.json)",
        data=export_settings_bytes(timetable),
        file_name="exam_settings.json",
        mime="application/json",
    )


if __name__ == "__main__":
    main()
