import io

import pandas as pd

from attendtrack.attendance.export import REPORT_FIELDS, report_csv, report_xlsx
from attendtrack.attendance.service import ReportData

DATA = ReportData(
    rows=[
        {
            "date": "2024-10-14",
            "time": "09:00:00",
            "student_name": "Zoë",
            "student_email": "zoe@uni.edu",
            "course_code": "CS101",
            "latitude": "",
            "longitude": "",
            "accuracy_m": "",
        }
    ],
    summary=[
        {
            "student_id": "s-1",
            "student_name": "Zoë",
            "student_email": "zoe@uni.edu",
            "days_attended": 1,
            "attendance": 100,
        }
    ],
    session_days=1,
)


def test_csv_has_bom_and_header():
    body = report_csv(DATA)
    assert body.startswith(b"\xef\xbb\xbf")

    lines = body.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(REPORT_FIELDS)
    assert lines[1].startswith("2024-10-14,09:00:00,Zoë,")


def test_xlsx_has_both_sheets():
    sheets = pd.read_excel(io.BytesIO(report_xlsx(DATA)), sheet_name=None, engine="openpyxl")

    assert set(sheets) == {"Check-ins", "Summary"}
    assert list(sheets["Summary"].columns) == ["student_name", "student_email", "days_attended", "attendance_pct"]
    assert sheets["Summary"].iloc[0]["attendance_pct"] == 100
