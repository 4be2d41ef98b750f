from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Course
from .repository import CourseRepository

_COLUMNS = "id, name, code, professor_id, semester, year, qr_code_url, created_at, updated_at"


def _to_course(r: dict) -> Course:
    return Course(
        course_id=r["id"],
        name=r["name"],
        code=r["code"],
        professor_id=r["professor_id"],
        semester=r.get("semester"),
        year=int(r["year"]) if r.get("year") is not None else None,
        qr_code_url=r.get("qr_code_url"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: str) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE id=%s", (course_id,))
            r = fetchone(cur)
            return _to_course(r) if r else None

    def list_for_professor(self, professor_id: str) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM courses
                WHERE professor_id=%s
                ORDER BY created_at DESC
                """,
                (professor_id,),
            )
            return [_to_course(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses ORDER BY created_at DESC")
            return [_to_course(r) for r in fetchall(cur)]

    def create_course(
        self,
        *,
        name: str,
        code: str,
        professor_id: str,
        semester: Optional[str] = None,
        year: Optional[int] = None,
    ) -> str:
        course_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO courses (id, name, code, professor_id, semester, year)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (course_id, name, code, professor_id, semester, year),
            )
        return course_id

    def update_course(
        self,
        *,
        course_id: str,
        name: str,
        code: str,
        semester: Optional[str],
        year: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE courses
                SET name=%s, code=%s, semester=%s, year=%s
                WHERE id=%s
                """,
                (name, code, semester, year, course_id),
            )
            return cur.rowcount > 0

    def set_qr_code_url(self, *, course_id: str, qr_code_url: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE courses SET qr_code_url=%s WHERE id=%s", (qr_code_url, course_id))
            return cur.rowcount > 0

    def delete_by_id(self, course_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM courses WHERE id=%s", (course_id,))
            return cur.rowcount > 0
