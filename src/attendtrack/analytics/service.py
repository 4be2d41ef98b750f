"""Attendance statistics panel.

The numbers are fabricated: every course gets a random roster with random
attendance percentages. The warning-email action is simulated as well.
"""
from __future__ import annotations

import random
from typing import Optional, Sequence

from ..common.numbers import round_half_up
from ..core.constants import (
    FAKE_ATTENDANCE_MAX,
    FAKE_ATTENDANCE_MIN,
    FAKE_STUDENTS_MAX,
    FAKE_STUDENTS_MIN,
    LOW_ATTENDANCE_THRESHOLD,
)
from ..core.exceptions import ValidationError
from ..courses.model import Course
from .model import AnalyticsSummary, CourseStat, StudentStat
from .notifier import SimulatedWarningNotifier

FIRST_NAMES = (
    "John", "Jane", "Michael", "Emily", "David", "Sarah", "James", "Jessica", "Robert", "Amanda",
    "William", "Ashley", "Richard", "Melissa", "Joseph", "Nicole", "Thomas", "Michelle", "Christopher", "Kimberly",
)
LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee",
)


def _average(values: Sequence[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


class AnalyticsService:
    def __init__(self, notifier: Optional[SimulatedWarningNotifier] = None, *, rng: Optional[random.Random] = None):
        self._notifier = notifier or SimulatedWarningNotifier()
        self._rng = rng or random.Random()

    def fake_students(self, courses: Sequence[Course], *, seed: Optional[int] = None) -> list[StudentStat]:
        rng = random.Random(seed) if seed is not None else self._rng
        students: list[StudentStat] = []
        for course in courses:
            count = rng.randint(FAKE_STUDENTS_MIN, FAKE_STUDENTS_MAX)
            for i in range(count):
                first = rng.choice(FIRST_NAMES)
                last = rng.choice(LAST_NAMES)
                students.append(
                    StudentStat(
                        student_id=f"student-{course.course_id}-{i}",
                        name=f"{first} {last}",
                        email=f"{first.lower()}.{last.lower()}@student.edu",
                        attendance=rng.randint(FAKE_ATTENDANCE_MIN, FAKE_ATTENDANCE_MAX),
                        course_name=course.name or course.code,
                        course_code=course.code,
                    )
                )
        return students

    def summarize(self, courses: Sequence[Course], students: Sequence[StudentStat]) -> AnalyticsSummary:
        course_stats = []
        for course in courses:
            values = [s.attendance for s in students if s.course_code == course.code]
            course_stats.append(
                CourseStat(
                    name=course.code or course.name,
                    average_attendance=_average(values),
                    student_count=len(values),
                )
            )

        return AnalyticsSummary(
            students=list(students),
            courses=course_stats,
            course_count=len(courses),
            average_attendance=_average([s.attendance for s in students]),
        )

    def new_seed(self) -> int:
        """Seed for one opening of the panel; the same seed regenerates the same roster."""
        return self._rng.randrange(2**31)

    def generate(self, courses: Sequence[Course], *, seed: Optional[int] = None) -> AnalyticsSummary:
        return self.summarize(courses, self.fake_students(courses, seed=seed))

    def send_warning_emails(self, students: Sequence[StudentStat]) -> int:
        """Simulate warning emails to every student below the threshold; returns how many."""
        low = [s for s in students if s.attendance < LOW_ATTENDANCE_THRESHOLD]
        if not low:
            raise ValidationError(
                f"There are no students with attendance below {LOW_ATTENDANCE_THRESHOLD}%.",
                title="No students to email",
            )
        return self._notifier.send(low)
