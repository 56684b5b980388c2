from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol, Sequence

import pandas as pd

from modules.exam_timetable import ExamTimetable, exam_classes, slots_for_class
from modules.invigilation import ExamSlot, chronological, group_duties_by_invigilator, is_assigned
from modules.staff_roster import StaffMember


SCHEDULE_COLUMNS = ["Date", "Time", "Duration", "Subject", "Class", "Venue", "Invigilator"]


def exam_schedule_df(slots: Iterable[ExamSlot], *, class_name: Optional[str] = None) -> pd.DataFrame:
    """Printable exam schedule, sorted by (date, time).

    If `class_name` is given only that class's slots are included.
    """

    rows = []
    for s in chronological(slots):
        if class_name is not None and s.class_name != class_name:
            continue
        rows.append(
            {
                "Date": s.date,
                "Time": s.time,
                "Duration": s.duration,
                "Subject": s.subject,
                "Class": s.class_name,
                "Venue": s.venue,
                "Invigilator": s.invigilator_name,
            }
        )
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def invigilator_load_df(slots: Iterable[ExamSlot], staff: Sequence[StaffMember]) -> pd.DataFrame:
    """Duty count per staff member (zero-duty staff included).

    Sorted by Duties descending; ties keep roster order.
    """

    counts: Dict[str, int] = {}
    for s in slots:
        if is_assigned(s):
            counts[s.invigilator_id] = counts.get(s.invigilator_id, 0) + 1

    rows = [
        {
            "staff_id": m.staff_id,
            "name": m.name,
            "status": m.status,
            "subjects": ", ".join(m.subjects),
            "Duties": int(counts.get(m.staff_id, 0)),
        }
        for m in staff
    ]
    out = pd.DataFrame(rows, columns=["staff_id", "name", "status", "subjects", "Duties"])
    if out.empty:
        return out
    return out.sort_values("Duties", ascending=False, kind="stable").reset_index(drop=True)


def duty_roster_df(slots: Iterable[ExamSlot]) -> pd.DataFrame:
    """Flatten the invigilation duty roster into one row per duty."""

    rows = []
    for sid, duties in group_duties_by_invigilator(slots).items():
        name = duties[0].invigilator_name if duties else "Unknown"
        for s in duties:
            rows.append(
                {
                    "Invigilator": name,
                    "staff_id": sid,
                    "Total Duties": len(duties),
                    "Date": s.date,
                    "Time": s.time,
                    "Subject": s.subject,
                    "Class": s.class_name,
                    "Venue": s.venue,
                }
            )
    return pd.DataFrame(
        rows,
        columns=["Invigilator", "staff_id", "Total Duties", "Date", "Time", "Subject", "Class", "Venue"],
    )


def _safe_sheet_name(name: str) -> str:
    """Excel sheet names: max 31 chars, cannot contain: `: \\ / ? * [ ]`."""

    bad = [":", "\\", "/", "?", "*", "[", "]"]
    out = str(name or "Sheet")
    for b in bad:
        out = out.replace(b, "-")
    out = out.strip() or "Sheet"
    return out[:31]


def _safe_file_name(name: str) -> str:
    """Single path component for archive members: no separators or reserved characters."""

    bad = [":", "\\", "/", "?", "*", "[", "]", "\"", "<", ">", "|"]
    out = str(name or "untitled")
    for b in bad:
        out = out.replace(b, "-")
    out = out.strip().strip(".") or "untitled"
    return out


def exam_reports_workbook_bytes(timetable: ExamTimetable) -> bytes:
    """Build a multi-sheet Excel workbook for the exam period.

    Includes:
    - full exam schedule (all classes)
    - invigilator load
    - invigilation duty roster
    - one sheet per class with a header block
    """

    # Pandas uses openpyxl to write .xlsx by default.
    out = io.BytesIO()

    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        exam_schedule_df(timetable.slots).to_excel(
            writer, sheet_name=_safe_sheet_name("Exam Schedule"), index=False
        )
        invigilator_load_df(timetable.slots, timetable.staff).to_excel(
            writer, sheet_name=_safe_sheet_name("Invigilator Load"), index=False
        )
        duty_roster_df(timetable.slots).to_excel(
            writer, sheet_name=_safe_sheet_name("Duty Roster"), index=False
        )

        for class_name in exam_classes(timetable):
            header_rows = [
                ["SCHOOL", timetable.school_name],
                ["TERM", timetable.term_info],
                ["ACADEMIC YEAR", timetable.academic_year],
                ["CLASS", class_name],
            ]
            header_df = pd.DataFrame(header_rows, columns=["Field", "Value"])
            df = exam_schedule_df(slots_for_class(timetable, class_name))

            sheet = _safe_sheet_name(f"Class-{class_name}")
            header_df.to_excel(writer, sheet_name=sheet, index=False, startrow=0)
            df.to_excel(writer, sheet_name=sheet, index=False, startrow=len(header_df) + 2)

    return out.getvalue()


def exam_reports_zip_bytes(timetable: ExamTimetable) -> bytes:
    """Create a ZIP with the workbook plus CSV tables (overall + per class)."""

    wb = exam_reports_workbook_bytes(timetable)

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as z:
        z.writestr("exam_reports.xlsx", wb)
        z.writestr("tables/exam_schedule.csv", exam_schedule_df(timetable.slots).to_csv(index=False).encode("utf-8"))
        z.writestr(
            "tables/invigilator_load.csv",
            invigilator_load_df(timetable.slots, timetable.staff).to_csv(index=False).encode("utf-8"),
        )
        z.writestr("tables/duty_roster.csv", duty_roster_df(timetable.slots).to_csv(index=False).encode("utf-8"))

        for class_name in exam_classes(timetable):
            df = exam_schedule_df(timetable.slots, class_name=class_name)
            z.writestr(f"schedules/classes/{_safe_file_name(class_name)}.csv", df.to_csv(index=False).encode("utf-8"))

    return buf.getvalue()


@dataclass(frozen=True)
class ImageExportOptions:
    title: Optional[str] = None
    font_size: int = 10
    cell_height: float = 0.35
    cell_width: float = 1.2


def df_to_markdown(df: pd.DataFrame) -> str:
    """Convert DataFrame to a GitHub-flavored Markdown table."""

    # pandas to_markdown needs tabulate; a table this simple does not.
    cols = list(df.columns)
    rows = df.astype(str).values.tolist()

    def esc(s: str) -> str:
        return str(s).replace("\n", " ").replace("|", "\\|")

    header = "| " + " | ".join(esc(c) for c in cols) + " |"
    sep = "| " + " | ".join(["---"] * len(cols)) + " |"
    body = ["| " + " | ".join(esc(v) for v in r) + " |" for r in rows]
    return "\n".join([header, sep] + body) + "\n"


def df_to_png_bytes(df: pd.DataFrame, *, options: ImageExportOptions = ImageExportOptions()) -> bytes:
    """Render a DataFrame as a printable PNG (matplotlib table artist)."""

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    nrows, ncols = df.shape

    fig_w = max(6.0, float(options.cell_width) * (ncols + 1))
    fig_h = max(2.0, float(options.cell_height) * (nrows + 2))

    fig, ax = plt.subplots(figsize=(fig_w, fig_h))
    ax.axis("off")

    if options.title:
        ax.set_title(options.title, fontsize=options.font_size + 2, pad=12)

    # An empty schedule still renders its header row.
    cell_text = df.astype(str).values.tolist() or [[""] * max(1, ncols)]
    tbl = ax.table(
        cellText=cell_text,
        colLabels=list(df.columns) if ncols else [""],
        cellLoc="center",
        loc="center",
    )

    tbl.auto_set_font_size(False)
    tbl.set_fontsize(options.font_size)
    tbl.scale(1.0, 1.4)

    for (r, c), cell in tbl.get_celld().items():
        cell.set_linewidth(0.6)
        if r == 0:
            cell.set_facecolor("#f0f2f6")
            cell.set_text_props(weight="bold")

    buf = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=200, bbox_inches="tight")
    plt.close(fig)
    return buf.getvalue()


# ----------------------------
# Document exporters
# ----------------------------


class DocumentExporter(Protocol):
    """Turns a printable table into a downloadable document."""

    filename_suffix: str
    mime: str

    def export(self, table: pd.DataFrame, *, title: str) -> bytes:  # pragma: no cover
        ...


class CsvExporter:
    filename_suffix = ".csv"
    mime = "text/csv"

    def export(self, table: pd.DataFrame, *, title: str) -> bytes:
        return table.to_csv(index=False).encode("utf-8")


class WorkbookExporter:
    filename_suffix = ".xlsx"
    mime = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def export(self, table: pd.DataFrame, *, title: str) -> bytes:
        out = io.BytesIO()
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            table.to_excel(writer, sheet_name=_safe_sheet_name(title), index=False)
        return out.getvalue()


class PngExporter:
    filename_suffix = ".png"
    mime = "image/png"

    def __init__(self, options: Optional[ImageExportOptions] = None) -> None:
        self.options = options or ImageExportOptions()

    def export(self, table: pd.DataFrame, *, title: str) -> bytes:
        opts = ImageExportOptions(
            title=title,
            font_size=self.options.font_size,
            cell_height=self.options.cell_height,
            cell_width=self.options.cell_width,
        )
        return df_to_png_bytes(table, options=opts)


EXPORTERS: Dict[str, type] = {
    "csv": CsvExporter,
    "xlsx": WorkbookExporter,
    "png": PngExporter,
}


def exporter_for(kind: str) -> DocumentExporter:
    key = str(kind or "").strip().lower()
    if key not in EXPORTERS:
        raise ValueError(f"Unknown export format: {kind!r} (expected one of: {', '.join(sorted(EXPORTERS))})")
    return EXPORTERS[key]()
