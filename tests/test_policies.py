import pytest

from attendtrack.core import policies
from attendtrack.core.enums import AppRole
from attendtrack.core.exceptions import AuthorizationError
from attendtrack.core.policies import Actor


def test_staff_covers_professor_and_admin(student, professor, admin):
    assert not student.is_staff
    assert professor.is_staff
    assert admin.is_staff


def test_profiles_are_public_but_only_self_editable(student):
    assert policies.can_view_profile(None)
    assert policies.can_update_profile(student, "student-1")
    assert not policies.can_update_profile(student, "someone-else")
    assert policies.can_insert_profile(student, "student-1")


def test_roles_are_visible_only_to_their_owner(student, admin):
    assert policies.can_view_roles(student, "student-1")
    assert not policies.can_view_roles(admin, "student-1")
    assert not policies.can_insert_role(student, "other")


def test_course_rules(student, professor, admin):
    assert policies.can_view_course(None)
    assert not policies.can_create_course(student)
    assert policies.can_create_course(professor)

    assert policies.can_update_course(professor, "prof-1")
    assert not policies.can_update_course(professor, "prof-2")
    assert policies.can_update_course(admin, "prof-2")

    assert not policies.can_delete_course(professor)
    assert policies.can_delete_course(admin)


def test_attendance_rules(student, professor):
    assert policies.can_view_attendance(student, "student-1")
    assert not policies.can_view_attendance(student, "student-2")
    assert policies.can_view_attendance(professor, "student-2")

    assert policies.can_create_attendance(student, "student-1")
    # staff cannot check students in on their behalf
    assert not policies.can_create_attendance(professor, "student-1")

    assert not policies.can_update_attendance(student)
    assert policies.can_update_attendance(professor)


def test_require_raises_with_message():
    with pytest.raises(AuthorizationError, match="nope"):
        policies.require(False, "nope")
    policies.require(True)


def test_actor_with_multiple_roles():
    actor = Actor(user_id="u", roles=frozenset({AppRole.STUDENT, AppRole.PROFESSOR}))
    assert actor.has_role(AppRole.STUDENT)
    assert actor.is_staff
