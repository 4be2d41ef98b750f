from __future__ import annotations

from enum import Enum


class AppRole(str, Enum):
    """User role used for access control (app_role)."""

    STUDENT = "student"
    PROFESSOR = "professor"
    ADMIN = "admin"


class AttendanceBand(str, Enum):
    """Colour band of an attendance percentage on the analytics panel."""

    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"
