from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_int_in_range, optional_text, require_non_empty
from ..core import policies
from ..core.constants import COURSE_YEAR_MAX, COURSE_YEAR_MIN
from ..core.exceptions import CourseNotFoundError
from ..core.policies import Actor
from .model import Course
from .repository import CourseRepository

logger = logging.getLogger(__name__)


class CourseService:
    """Use cases: professors manage their courses."""

    def __init__(self, courses: CourseRepository):
        self._courses = courses

    def _clean(self, *, name, code, semester, year) -> dict:
        return {
            "name": require_non_empty(name, "Course name", "Course name is required"),
            "code": require_non_empty(code, "Course code", "Course code is required"),
            "semester": optional_text(semester),
            "year": optional_int_in_range(year, "Year", COURSE_YEAR_MIN, COURSE_YEAR_MAX),
        }

    def create_course(
        self,
        actor: Actor,
        *,
        name: Optional[str],
        code: Optional[str],
        semester: Optional[str] = None,
        year: Optional[str | int] = None,
    ) -> Course:
        policies.require(policies.can_create_course(actor), "Only professors can create courses")
        data = self._clean(name=name, code=code, semester=semester, year=year)

        course_id = self._courses.create_course(professor_id=actor.user_id, **data)
        logger.info("course %s (%s) created by %s", course_id, data["code"], actor.user_id)
        return Course(course_id=course_id, professor_id=actor.user_id, **data)

    def get_course(self, course_id: str) -> Optional[Course]:
        if not course_id:
            return None
        return self._courses.get_by_id(course_id)

    def require_course(self, course_id: str) -> Course:
        course = self.get_course(course_id)
        if not course:
            raise CourseNotFoundError("The requested course doesn't exist.")
        return course

    def list_for_professor(self, professor_id: str) -> Sequence[Course]:
        return self._courses.list_for_professor(professor_id)

    def list_all(self) -> Sequence[Course]:
        return self._courses.list_all()

    def require_manageable(self, actor: Actor, course_id: str) -> Course:
        """Load a course the actor may update (owner or admin)."""
        course = self.require_course(course_id)
        policies.require(
            policies.can_update_course(actor, course.professor_id),
            "You can only manage your own courses",
        )
        return course

    def update_course(
        self,
        actor: Actor,
        course_id: str,
        *,
        name: Optional[str],
        code: Optional[str],
        semester: Optional[str] = None,
        year: Optional[str | int] = None,
    ) -> Course:
        course = self.require_manageable(actor, course_id)
        data = self._clean(name=name, code=code, semester=semester, year=year)
        self._courses.update_course(course_id=course.course_id, **data)
        return self.require_course(course.course_id)

    def set_qr_code_url(self, actor: Actor, course_id: str, qr_code_url: Optional[str]) -> None:
        course = self.require_manageable(actor, course_id)
        if course.qr_code_url != qr_code_url:
            self._courses.set_qr_code_url(course_id=course.course_id, qr_code_url=qr_code_url)

    def delete_course(self, actor: Actor, course_id: str) -> None:
        policies.require(policies.can_delete_course(actor), "Only admins can delete courses")
        if not self._courses.delete_by_id(course_id):
            raise CourseNotFoundError("The requested course doesn't exist.")
        logger.info("course %s deleted by %s", course_id, actor.user_id)
