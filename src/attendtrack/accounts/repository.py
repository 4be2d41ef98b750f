from __future__ import annotations

from typing import FrozenSet, Optional, Protocol, Sequence

from ..core.enums import AppRole
from .model import Account, Profile


class AccountRepository(Protocol):
    """Repository interface for identities, profiles and roles.

    Note: services depend on this interface, never on a concrete database.
    """

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(self, *, email: str, password_hash: str, full_name: str, role: AppRole) -> str:
        """Create identity, profile and first role atomically; return the new user id."""

        raise NotImplementedError

    def get_profile(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_profiles(self) -> Sequence[Profile]:
        raise NotImplementedError

    def update_profile(self, *, user_id: str, full_name: str) -> bool:
        raise NotImplementedError

    def get_roles(self, user_id: str) -> FrozenSet[AppRole]:
        raise NotImplementedError

    def add_role(self, *, user_id: str, role: AppRole) -> bool:
        raise NotImplementedError
