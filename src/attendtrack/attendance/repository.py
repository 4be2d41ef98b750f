from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceRow, GeoLocation


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_in_window(
        self,
        *,
        student_id: str,
        course_id: str,
        start: datetime,
        end: datetime,
    ) -> Optional[AttendanceRecord]:
        """A check-in with start <= checked_in_at < end, if any."""

        raise NotImplementedError

    def create_record(
        self,
        *,
        student_id: str,
        course_id: str,
        checked_in_at: datetime,
        location: Optional[GeoLocation] = None,
    ) -> str:
        raise NotImplementedError

    def update_record(
        self,
        *,
        record_id: str,
        checked_in_at: datetime,
        location: Optional[GeoLocation],
    ) -> bool:
        raise NotImplementedError

    def recent_for_student(self, student_id: str, limit: int) -> Sequence[AttendanceRow]:
        raise NotImplementedError

    def rows_for_course(
        self,
        *,
        course_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[AttendanceRow]:
        raise NotImplementedError
