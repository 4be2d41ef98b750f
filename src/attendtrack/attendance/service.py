from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..common.numbers import percent
from ..core import policies
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import NotFoundError, ValidationError
from ..core.policies import Actor
from ..courses.repository import CourseRepository
from .model import AttendanceRow, GeoLocation
from .repository import AttendanceRepository


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    session_days: int


def _bounds(start: Optional[date], end: Optional[date]) -> tuple[Optional[datetime], Optional[datetime]]:
    """Inclusive date range -> half-open datetime range."""
    if start and end and end < start:
        raise ValidationError("End date must not be before start date")
    lo = datetime.combine(start, time.min) if start else None
    hi = datetime.combine(end, time.min) + timedelta(days=1) if end else None
    return lo, hi


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, courses: CourseRepository):
        self._attendance = attendance
        self._courses = courses

    def history_for_student(
        self,
        actor: Actor,
        student_id: Optional[str] = None,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRow]:
        student_id = student_id or actor.user_id
        policies.require(policies.can_view_attendance(actor, student_id), "You can only view your own attendance")
        return self._attendance.recent_for_student(student_id, limit)

    def records_for_course(
        self,
        actor: Actor,
        course_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRow]:
        """Rows the actor may see: everything for professors/admins, own rows for students."""
        if not self._courses.get_by_id(course_id):
            raise NotFoundError("Course not found")
        lo, hi = _bounds(start, end)
        student_filter = None if actor.is_staff else actor.user_id
        return self._attendance.rows_for_course(course_id=course_id, start=lo, end=hi, student_id=student_filter)

    def update_record(
        self,
        actor: Actor,
        record_id: str,
        *,
        checked_in_at: Optional[datetime] = None,
        location: Optional[GeoLocation] = None,
        clear_location: bool = False,
    ) -> None:
        policies.require(policies.can_update_attendance(actor), "Only professors can edit attendance")
        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        new_location = None if clear_location else (location or record.location)
        self._attendance.update_record(
            record_id=record.record_id,
            checked_in_at=checked_in_at or record.checked_in_at,
            location=new_location,
        )

    def course_report(
        self,
        actor: Actor,
        course_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ReportData:
        """Per-check-in rows plus a per-student summary.

        A session day is a date on which at least one student checked in; a
        student's rate is their attended session days over all session days.
        """
        rows = self.records_for_course(actor, course_id, start=start, end=end)

        session_days = {r.checked_in_at.date() for r in rows}
        out_rows: list[dict] = []
        per_student: dict[str, dict] = {}

        for r in rows:
            out_rows.append(
                {
                    "date": r.checked_in_at.strftime("%Y-%m-%d"),
                    "time": r.checked_in_at.strftime("%H:%M:%S"),
                    "student_name": r.student_name,
                    "student_email": r.student_email,
                    "course_code": r.course_code,
                    "latitude": "" if r.latitude is None else f"{r.latitude:.6f}",
                    "longitude": "" if r.longitude is None else f"{r.longitude:.6f}",
                    "accuracy_m": "" if r.location_accuracy is None else f"{r.location_accuracy:.0f}",
                }
            )

            s = per_student.get(r.student_id)
            if not s:
                s = {
                    "student_id": r.student_id,
                    "student_name": r.student_name,
                    "student_email": r.student_email,
                    "days": set(),
                }
                per_student[r.student_id] = s
            s["days"].add(r.checked_in_at.date())

        total_days = len(session_days)
        summary = []
        for s in per_student.values():
            attended = len(s["days"])
            summary.append(
                {
                    "student_id": s["student_id"],
                    "student_name": s["student_name"],
                    "student_email": s["student_email"],
                    "days_attended": attended,
                    "attendance": percent(attended, total_days),
                }
            )

        summary.sort(key=lambda x: (-x["attendance"], x["student_name"]))
        return ReportData(rows=out_rows, summary=summary, session_days=total_days)
