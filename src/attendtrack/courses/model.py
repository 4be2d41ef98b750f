from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Course:
    course_id: str
    name: str
    code: str
    professor_id: str
    semester: Optional[str] = None
    year: Optional[int] = None
    qr_code_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def label(self) -> str:
        return f"{self.name} ({self.code})"
