from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import FrozenSet, Optional

import pytest

from attendtrack.accounts.model import Account, Profile
from attendtrack.attendance.model import AttendanceRecord, AttendanceRow, GeoLocation
from attendtrack.container import wire
from attendtrack.core.enums import AppRole
from attendtrack.core.policies import Actor
from attendtrack.courses.model import Course
from attendtrack.main import create_app


class InMemoryAccounts:
    def __init__(self):
        self.accounts: dict[str, Account] = {}
        self.profiles: dict[str, Profile] = {}
        self.roles: dict[str, set[AppRole]] = {}

    def get_by_email(self, email: str) -> Optional[Account]:
        return next((a for a in self.accounts.values() if a.email == email), None)

    def get_by_id(self, user_id: str) -> Optional[Account]:
        return self.accounts.get(user_id)

    def create_account(self, *, email: str, password_hash: str, full_name: str, role: AppRole) -> str:
        user_id = str(uuid.uuid4())
        self.accounts[user_id] = Account(user_id=user_id, email=email, password_hash=password_hash)
        self.profiles[user_id] = Profile(user_id=user_id, email=email, full_name=full_name or "")
        self.roles[user_id] = {role}
        return user_id

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.profiles.get(user_id)

    def list_profiles(self):
        return list(self.profiles.values())

    def update_profile(self, *, user_id: str, full_name: str) -> bool:
        if user_id not in self.profiles:
            return False
        self.profiles[user_id] = replace(self.profiles[user_id], full_name=full_name)
        return True

    def get_roles(self, user_id: str) -> FrozenSet[AppRole]:
        return frozenset(self.roles.get(user_id, set()))

    def add_role(self, *, user_id: str, role: AppRole) -> bool:
        held = self.roles.setdefault(user_id, set())
        if role in held:
            return False
        held.add(role)
        return True


class InMemoryCourses:
    def __init__(self):
        self.courses: dict[str, Course] = {}
        self._tick = 0

    def add(self, *, name="Introduction to Computer Science", code="CS101", professor_id="prof-1", **extra) -> Course:
        course_id = self.create_course(name=name, code=code, professor_id=professor_id, **extra)
        return self.courses[course_id]

    def get_by_id(self, course_id: str) -> Optional[Course]:
        return self.courses.get(course_id)

    def list_for_professor(self, professor_id: str):
        items = [c for c in self.courses.values() if c.professor_id == professor_id]
        return sorted(items, key=lambda c: c.created_at, reverse=True)

    def list_all(self):
        return sorted(self.courses.values(), key=lambda c: c.created_at, reverse=True)

    def create_course(self, *, name, code, professor_id, semester=None, year=None) -> str:
        self._tick += 1
        course_id = str(uuid.uuid4())
        self.courses[course_id] = Course(
            course_id=course_id,
            name=name,
            code=code,
            professor_id=professor_id,
            semester=semester,
            year=year,
            created_at=datetime(2024, 9, 1, 8, 0, self._tick),
        )
        return course_id

    def update_course(self, *, course_id, name, code, semester, year) -> bool:
        if course_id not in self.courses:
            return False
        self.courses[course_id] = replace(self.courses[course_id], name=name, code=code, semester=semester, year=year)
        return True

    def set_qr_code_url(self, *, course_id, qr_code_url) -> bool:
        if course_id not in self.courses:
            return False
        self.courses[course_id] = replace(self.courses[course_id], qr_code_url=qr_code_url)
        return True

    def delete_by_id(self, course_id: str) -> bool:
        return self.courses.pop(course_id, None) is not None


class InMemoryAttendance:
    def __init__(self, accounts: InMemoryAccounts, courses: InMemoryCourses):
        self.records: dict[str, AttendanceRecord] = {}
        self._accounts = accounts
        self._courses = courses

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return self.records.get(record_id)

    def find_in_window(self, *, student_id, course_id, start, end) -> Optional[AttendanceRecord]:
        for r in self.records.values():
            if r.student_id == student_id and r.course_id == course_id and start <= r.checked_in_at < end:
                return r
        return None

    def create_record(self, *, student_id, course_id, checked_in_at, location: Optional[GeoLocation] = None) -> str:
        record_id = str(uuid.uuid4())
        self.records[record_id] = AttendanceRecord(
            record_id=record_id,
            student_id=student_id,
            course_id=course_id,
            checked_in_at=checked_in_at,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            location_accuracy=location.accuracy if location else None,
        )
        return record_id

    def update_record(self, *, record_id, checked_in_at, location) -> bool:
        if record_id not in self.records:
            return False
        self.records[record_id] = replace(
            self.records[record_id],
            checked_in_at=checked_in_at,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            location_accuracy=location.accuracy if location else None,
        )
        return True

    def _row(self, r: AttendanceRecord) -> AttendanceRow:
        profile = self._accounts.get_profile(r.student_id)
        course = self._courses.get_by_id(r.course_id)
        return AttendanceRow(
            record_id=r.record_id,
            student_id=r.student_id,
            student_name=(profile.full_name if profile else "") or "",
            student_email=profile.email if profile else "",
            course_id=r.course_id,
            course_name=course.name if course else "",
            course_code=course.code if course else "",
            checked_in_at=r.checked_in_at,
            latitude=r.latitude,
            longitude=r.longitude,
            location_accuracy=r.location_accuracy,
        )

    def recent_for_student(self, student_id: str, limit: int):
        items = [r for r in self.records.values() if r.student_id == student_id]
        items.sort(key=lambda r: r.checked_in_at, reverse=True)
        return [self._row(r) for r in items[:limit]]

    def rows_for_course(self, *, course_id, start=None, end=None, student_id=None):
        items = [
            r
            for r in self.records.values()
            if r.course_id == course_id
            and (start is None or r.checked_in_at >= start)
            and (end is None or r.checked_in_at < end)
            and (student_id is None or r.student_id == student_id)
        ]
        items.sort(key=lambda r: r.checked_in_at, reverse=True)
        return [self._row(r) for r in items]


@pytest.fixture
def fixed_now():
    return datetime(2024, 10, 15, 9, 30, 0)


@pytest.fixture
def accounts():
    return InMemoryAccounts()


@pytest.fixture
def courses():
    return InMemoryCourses()


@pytest.fixture
def attendance(accounts, courses):
    return InMemoryAttendance(accounts, courses)


@pytest.fixture
def student():
    return Actor(user_id="student-1", roles=frozenset({AppRole.STUDENT}))


@pytest.fixture
def professor():
    return Actor(user_id="prof-1", roles=frozenset({AppRole.PROFESSOR}))


@pytest.fixture
def admin():
    return Actor(user_id="admin-1", roles=frozenset({AppRole.ADMIN}))


@pytest.fixture
def container(accounts, courses, attendance):
    return wire(
        accounts_repo=accounts,
        courses_repo=courses,
        attendance_repo=attendance,
        warning_send_delay=0,
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="attendtrack.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_id: str, *roles: AppRole, name: str = "Test User", email: str = "test@example.edu"):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["name"] = name
            sess["email"] = email
            sess["roles"] = [r.value for r in roles]

    return _login
