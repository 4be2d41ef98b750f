"""QR check-in.

A check-in is three sequential steps against the database: make sure the
scanned course exists, make sure the student has not already checked in to it
during the current local day, then insert the record. There is no retry and
no locking; the steps are not atomic.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional

from ..common.datetime_utils import day_window, now_local
from ..core import policies
from ..core.exceptions import AlreadyCheckedInError, CourseNotFoundError
from ..core.policies import Actor
from ..courses.model import Course
from ..courses.repository import CourseRepository
from ..qr.codec import decode_image
from ..qr.payload import parse_scanned
from .model import GeoLocation
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    course: Course
    record_id: str
    checked_in_at: datetime
    location: Optional[GeoLocation]

    @property
    def message(self) -> str:
        return f"You've been marked present for {self.course.name} ({self.course.code})."


class CheckInService:
    def __init__(self, courses: CourseRepository, attendance: AttendanceRepository):
        self._courses = courses
        self._attendance = attendance

    def check_in(
        self,
        actor: Actor,
        qr_data: Optional[str],
        *,
        location: Optional[GeoLocation] = None,
        student_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        student_id = student_id or actor.user_id
        policies.require(
            policies.can_create_attendance(actor, student_id),
            "You can only check yourself in",
        )
        now = now or now_local()

        course_id = parse_scanned(qr_data)

        course = self._courses.get_by_id(course_id)
        if not course:
            raise CourseNotFoundError("The scanned QR code references a course that doesn't exist.")

        start, end = day_window(now)
        existing = self._attendance.find_in_window(
            student_id=student_id,
            course_id=course.course_id,
            start=start,
            end=end,
        )
        if existing:
            raise AlreadyCheckedInError(f"You've already checked in to {course.name} today.")

        record_id = self._attendance.create_record(
            student_id=student_id,
            course_id=course.course_id,
            checked_in_at=now,
            location=location,
        )
        logger.info(
            "student %s checked in to %s (%s)%s",
            student_id,
            course.code,
            record_id,
            "" if location else " without location",
        )
        return CheckInResult(course=course, record_id=record_id, checked_in_at=now, location=location)

    def check_in_image(
        self,
        actor: Actor,
        stream: BinaryIO,
        *,
        location: Optional[GeoLocation] = None,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        """Decode an uploaded photo of the course QR code, then check in."""
        return self.check_in(actor, decode_image(stream), location=location, now=now)
