from __future__ import annotations

import csv
import io

import pandas as pd

from .service import ReportData

REPORT_FIELDS = [
    "date",
    "time",
    "student_name",
    "student_email",
    "course_code",
    "latitude",
    "longitude",
    "accuracy_m",
]

SUMMARY_FIELDS = ["student_name", "student_email", "days_attended", "attendance"]


def report_csv(data: ReportData) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for row in data.rows:
        writer.writerow(row)
    # BOM so spreadsheet apps detect UTF-8 names
    return out.getvalue().encode("utf-8-sig")


def report_xlsx(data: ReportData) -> bytes:
    """Workbook with a check-ins sheet and a per-student summary sheet."""
    checkins = pd.DataFrame(data.rows, columns=REPORT_FIELDS)
    summary = pd.DataFrame(data.summary, columns=SUMMARY_FIELDS)
    summary = summary.rename(columns={"attendance": "attendance_pct"})

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        checkins.to_excel(writer, sheet_name="Check-ins", index=False)
        summary.to_excel(writer, sheet_name="Summary", index=False)
    return out.getvalue()
