"""Course QR payloads.

A course QR code carries a small JSON document::

    {"course_id": "...", "course_name": "...", "course_code": "...", "timestamp": "..."}

Scanners are lenient: a JSON object may name the course with ``course_id`` or
``id``, and text that is not JSON at all is taken as the course id itself.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..core.exceptions import InvalidQRCodeError
from ..courses.model import Course

INVALID_QR_MESSAGE = "The scanned QR code does not contain valid course information."


@dataclass(frozen=True)
class QRPayload:
    course_id: str
    course_name: str
    course_code: str
    timestamp: str

    def to_json(self) -> str:
        return json.dumps(asdict(self))


def build_payload(course: Course, *, now: Optional[datetime] = None) -> QRPayload:
    now = now or datetime.now().astimezone()
    return QRPayload(
        course_id=course.course_id,
        course_name=course.name,
        course_code=course.code,
        timestamp=now.isoformat(),
    )


def download_filename(course_code: str) -> str:
    return f"{course_code}-qr-code.png"


def parse_scanned(text: Optional[str]) -> str:
    """Extract the course id from scanned QR text."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidQRCodeError(INVALID_QR_MESSAGE)
    text = text.strip()

    try:
        data = json.loads(text)
    except ValueError:
        data = {"course_id": text}

    if not isinstance(data, dict):
        # valid JSON but not an object (e.g. a bare number): treat like plain text
        data = {"course_id": text}

    course_id = data.get("course_id") or data.get("id")
    if not course_id:
        raise InvalidQRCodeError(INVALID_QR_MESSAGE)
    return str(course_id).strip()
