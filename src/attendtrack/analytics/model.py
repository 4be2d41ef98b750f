from __future__ import annotations

from dataclasses import dataclass, field

from ..core.constants import LOW_ATTENDANCE_THRESHOLD, WARNING_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceBand


def band_for(attendance: int) -> AttendanceBand:
    if attendance >= LOW_ATTENDANCE_THRESHOLD:
        return AttendanceBand.GOOD
    if attendance >= WARNING_ATTENDANCE_THRESHOLD:
        return AttendanceBand.WARNING
    return AttendanceBand.POOR


@dataclass(frozen=True)
class StudentStat:
    student_id: str
    name: str
    email: str
    attendance: int
    course_name: str
    course_code: str

    @property
    def band(self) -> AttendanceBand:
        return band_for(self.attendance)

    @property
    def is_low(self) -> bool:
        return self.attendance < LOW_ATTENDANCE_THRESHOLD


@dataclass(frozen=True)
class CourseStat:
    name: str
    average_attendance: int
    student_count: int

    @property
    def band(self) -> AttendanceBand:
        return band_for(self.average_attendance)


@dataclass(frozen=True)
class AnalyticsSummary:
    students: list[StudentStat] = field(default_factory=list)
    courses: list[CourseStat] = field(default_factory=list)
    course_count: int = 0
    average_attendance: int = 0

    @property
    def total_students(self) -> int:
        return len(self.students)

    @property
    def low_attendance(self) -> list[StudentStat]:
        return [s for s in self.students if s.is_low]

    def to_dict(self) -> dict:
        def student(s: StudentStat) -> dict:
            return {
                "id": s.student_id,
                "name": s.name,
                "email": s.email,
                "attendance": s.attendance,
                "course_name": s.course_name,
                "course_code": s.course_code,
                "band": s.band.value,
            }

        return {
            "total_students": self.total_students,
            "low_attendance_count": len(self.low_attendance),
            "average_attendance": self.average_attendance,
            "course_count": self.course_count,
            "courses": [
                {
                    "name": c.name,
                    "average_attendance": c.average_attendance,
                    "student_count": c.student_count,
                    "band": c.band.value,
                }
                for c in self.courses
            ],
            "low_attendance": [student(s) for s in self.low_attendance],
            "students": [student(s) for s in self.students],
        }
