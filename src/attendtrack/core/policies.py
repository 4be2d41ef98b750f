"""Access policies for profiles, roles, courses and attendance records.

Every predicate mirrors one row-level rule of the database: who may SELECT,
INSERT, UPDATE or DELETE a given row. Services call :func:`require` before
touching a repository so the same rules hold no matter which controller
(HTML or JSON) triggered the call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from .enums import AppRole
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an action."""

    user_id: str
    roles: FrozenSet[AppRole] = field(default_factory=frozenset)

    def has_role(self, role: AppRole) -> bool:
        return role in self.roles

    @property
    def is_staff(self) -> bool:
        return self.has_role(AppRole.PROFESSOR) or self.has_role(AppRole.ADMIN)


def require(allowed: bool, message: str = "You do not have permission to do that") -> None:
    if not allowed:
        raise AuthorizationError(message)


# profiles

def can_view_profile(actor: Actor | None) -> bool:
    return True


def can_insert_profile(actor: Actor, profile_id: str) -> bool:
    return actor.user_id == profile_id


def can_update_profile(actor: Actor, profile_id: str) -> bool:
    return actor.user_id == profile_id


# user_roles

def can_view_roles(actor: Actor, user_id: str) -> bool:
    return actor.user_id == user_id


def can_insert_role(actor: Actor, user_id: str) -> bool:
    return actor.user_id == user_id


# courses

def can_view_course(actor: Actor | None) -> bool:
    return True


def can_create_course(actor: Actor) -> bool:
    return actor.is_staff


def can_update_course(actor: Actor, professor_id: str) -> bool:
    return professor_id == actor.user_id or actor.has_role(AppRole.ADMIN)


def can_delete_course(actor: Actor) -> bool:
    return actor.has_role(AppRole.ADMIN)


# attendance_records

def can_view_attendance(actor: Actor, student_id: str) -> bool:
    return student_id == actor.user_id or actor.is_staff


def can_create_attendance(actor: Actor, student_id: str) -> bool:
    return student_id == actor.user_id


def can_update_attendance(actor: Actor) -> bool:
    return actor.is_staff
