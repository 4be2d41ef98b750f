from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_float, db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceRow, GeoLocation
from .repository import AttendanceRepository

_RECORD_COLUMNS = "id, student_id, course_id, checked_in_at, latitude, longitude, location_accuracy, created_at"

_ROW_SELECT = """
    SELECT
        ar.id, ar.student_id, ar.course_id, ar.checked_in_at,
        ar.latitude, ar.longitude, ar.location_accuracy,
        COALESCE(NULLIF(p.full_name, ''), p.email, '') AS student_name,
        COALESCE(p.email, '') AS student_email,
        c.name AS course_name, c.code AS course_code
    FROM attendance_records ar
    JOIN courses c ON c.id = ar.course_id
    LEFT JOIN profiles p ON p.id = ar.student_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=r["id"],
        student_id=r["student_id"],
        course_id=r["course_id"],
        checked_in_at=r["checked_in_at"],
        latitude=as_float(r.get("latitude")),
        longitude=as_float(r.get("longitude")),
        location_accuracy=as_float(r.get("location_accuracy")),
        created_at=r.get("created_at"),
    )


def _to_row(r: dict) -> AttendanceRow:
    return AttendanceRow(
        record_id=r["id"],
        student_id=r["student_id"],
        student_name=r["student_name"],
        student_email=r["student_email"],
        course_id=r["course_id"],
        course_name=r["course_name"],
        course_code=r["course_code"],
        checked_in_at=r["checked_in_at"],
        latitude=as_float(r.get("latitude")),
        longitude=as_float(r.get("longitude")),
        location_accuracy=as_float(r.get("location_accuracy")),
    )


def _location_params(location: Optional[GeoLocation]) -> tuple:
    if location is None:
        return (None, None, None)
    return (
        as_decimal(location.latitude, 8),
        as_decimal(location.longitude, 8),
        as_decimal(location.accuracy, 2),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_in_window(
        self,
        *,
        student_id: str,
        course_id: str,
        start: datetime,
        end: datetime,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND course_id=%s
                  AND checked_in_at >= %s AND checked_in_at < %s
                ORDER BY checked_in_at ASC
                LIMIT 1
                """,
                (student_id, course_id, start, end),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_record(
        self,
        *,
        student_id: str,
        course_id: str,
        checked_in_at: datetime,
        location: Optional[GeoLocation] = None,
    ) -> str:
        record_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records
                    (id, student_id, course_id, checked_in_at, latitude, longitude, location_accuracy)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (record_id, student_id, course_id, checked_in_at, *_location_params(location)),
            )
        return record_id

    def update_record(
        self,
        *,
        record_id: str,
        checked_in_at: datetime,
        location: Optional[GeoLocation],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET checked_in_at=%s, latitude=%s, longitude=%s, location_accuracy=%s
                WHERE id=%s
                """,
                (checked_in_at, *_location_params(location), record_id),
            )
            return cur.rowcount > 0

    def recent_for_student(self, student_id: str, limit: int) -> Sequence[AttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _ROW_SELECT
                + """
                WHERE ar.student_id=%s
                ORDER BY ar.checked_in_at DESC
                LIMIT %s
                """,
                (student_id, int(limit)),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def rows_for_course(
        self,
        *,
        course_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[AttendanceRow]:
        clauses = ["ar.course_id=%s"]
        params: list[object] = [course_id]

        if start is not None:
            clauses.append("ar.checked_in_at >= %s")
            params.append(start)
        if end is not None:
            clauses.append("ar.checked_in_at < %s")
            params.append(end)
        if student_id is not None:
            clauses.append("ar.student_id=%s")
            params.append(student_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _ROW_SELECT
                + f"""
                WHERE {where}
                ORDER BY ar.checked_in_at DESC, student_name ASC
                """,
                tuple(params),
            )
            return [_to_row(r) for r in fetchall(cur)]
