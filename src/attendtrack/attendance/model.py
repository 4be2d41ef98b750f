from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class GeoLocation:
    """Position reported by the browser when the student scanned."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None

    def __post_init__(self):
        for name in ("latitude", "longitude", "accuracy"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValidationError(f"{name} must be a finite number")
        if not -90 <= self.latitude <= 90:
            raise ValidationError("latitude must be between -90 and 90")
        if not -180 <= self.longitude <= 180:
            raise ValidationError("longitude must be between -180 and 180")
        if self.accuracy is not None and self.accuracy < 0:
            raise ValidationError("accuracy cannot be negative")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> Optional["GeoLocation"]:
        """Build from a JSON/form mapping using lat/lng/accuracy keys; missing coordinates mean no location."""
        if not data:
            return None
        if not isinstance(data, Mapping):
            raise ValidationError("Location must be numeric")
        lat = data.get("lat", data.get("latitude"))
        lng = data.get("lng", data.get("longitude"))
        accuracy = data.get("accuracy")
        if lat in (None, "") or lng in (None, ""):
            return None
        try:
            return cls(
                latitude=float(lat),
                longitude=float(lng),
                accuracy=float(accuracy) if accuracy not in (None, "") else None,
            )
        except (TypeError, ValueError):
            raise ValidationError("Location must be numeric")


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in of a student to a course."""

    record_id: str
    student_id: str
    course_id: str
    checked_in_at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_accuracy: Optional[float] = None
    created_at: Optional[datetime] = None

    @property
    def location(self) -> Optional[GeoLocation]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoLocation(self.latitude, self.longitude, self.location_accuracy)


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for history pages and reports (record joined with course and student)."""

    record_id: str
    student_id: str
    student_name: str
    student_email: str
    course_id: str
    course_name: str
    course_code: str
    checked_in_at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_accuracy: Optional[float] = None
