from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course


class CourseRepository(Protocol):
    def get_by_id(self, course_id: str) -> Optional[Course]:
        raise NotImplementedError

    def list_for_professor(self, professor_id: str) -> Sequence[Course]:
        """Newest first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def create_course(
        self,
        *,
        name: str,
        code: str,
        professor_id: str,
        semester: Optional[str] = None,
        year: Optional[int] = None,
    ) -> str:
        raise NotImplementedError

    def update_course(
        self,
        *,
        course_id: str,
        name: str,
        code: str,
        semester: Optional[str],
        year: Optional[int],
    ) -> bool:
        raise NotImplementedError

    def set_qr_code_url(self, *, course_id: str, qr_code_url: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, course_id: str) -> bool:
        raise NotImplementedError
