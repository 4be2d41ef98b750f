from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length
from ..core import policies
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AppRole
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.policies import Actor
from .model import Profile
from .repository import AccountRepository

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = (AppRole.STUDENT, AppRole.PROFESSOR)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    email: str
    full_name: str
    roles: tuple[str, ...]


class AuthService:
    """Use cases: sign up and sign in."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def sign_up(self, *, email: str, password: str, full_name: str = "", role: AppRole | str = AppRole.STUDENT) -> str:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        try:
            role = AppRole(role)
        except ValueError:
            raise ValidationError("Unknown account type")
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError("Admin accounts cannot be created from sign up")

        if self._accounts.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user_id = self._accounts.create_account(
            email=email,
            password_hash=generate_password_hash(password),
            full_name=(full_name or "").strip(),
            role=role,
        )
        logger.info("signed up %s as %s", user_id, role.value)
        return user_id

    def authenticate(self, email: str, password: str) -> SessionUser:
        account = self._accounts.get_by_email((email or "").strip().lower())
        if not account:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        profile = self._accounts.get_profile(account.user_id)
        roles = self._accounts.get_roles(account.user_id)
        return SessionUser(
            user_id=account.user_id,
            email=account.email,
            full_name=(profile.full_name if profile else "") or "",
            roles=tuple(sorted(r.value for r in roles)),
        )


class ProfileService:
    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def get_profile(self, user_id: str) -> Profile:
        profile = self._accounts.get_profile(user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def list_profiles(self) -> Sequence[Profile]:
        return self._accounts.list_profiles()

    def update_profile(self, actor: Actor, *, profile_id: str, full_name: Optional[str]) -> None:
        policies.require(policies.can_update_profile(actor, profile_id), "You can only edit your own profile")
        if not self._accounts.update_profile(user_id=profile_id, full_name=(full_name or "").strip()):
            raise NotFoundError("Profile not found")


class RoleService:
    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def has_role(self, user_id: str, role: AppRole) -> bool:
        """Unrestricted role lookup, used when evaluating policies for another user."""
        return role in self._accounts.get_roles(user_id)

    def roles_for(self, actor: Actor, user_id: str) -> FrozenSet[AppRole]:
        policies.require(policies.can_view_roles(actor, user_id), "You can only view your own roles")
        return self._accounts.get_roles(user_id)

    def grant_role(self, actor: Actor, *, user_id: str, role: AppRole) -> bool:
        policies.require(policies.can_insert_role(actor, user_id), "You can only add roles to your own account")
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError("Admin role cannot be self-assigned")
        return self._accounts.add_role(user_id=user_id, role=role)
