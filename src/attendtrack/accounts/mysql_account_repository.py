from __future__ import annotations

import uuid
from typing import FrozenSet, Optional, Sequence

from ..core.enums import AppRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Account, Profile
from .repository import AccountRepository


def _to_profile(row: dict) -> Profile:
    return Profile(
        user_id=row["id"],
        email=row["email"],
        full_name=row.get("full_name"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, password_hash FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            if not row:
                return None
            return Account(user_id=row["id"], email=row["email"], password_hash=row["password_hash"])

    def get_by_id(self, user_id: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, password_hash FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            if not row:
                return None
            return Account(user_id=row["id"], email=row["email"], password_hash=row["password_hash"])

    def create_account(self, *, email: str, password_hash: str, full_name: str, role: AppRole) -> str:
        user_id = str(uuid.uuid4())
        # One transaction: a new identity always gets its profile (full_name defaults to '')
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users (id, email, password_hash) VALUES (%s, %s, %s)",
                (user_id, email, password_hash),
            )
            cur.execute(
                "INSERT INTO profiles (id, email, full_name) VALUES (%s, %s, %s)",
                (user_id, email, full_name or ""),
            )
            cur.execute(
                "INSERT INTO user_roles (id, user_id, role) VALUES (%s, %s, %s)",
                (str(uuid.uuid4()), user_id, role.value),
            )
        return user_id

    def get_profile(self, user_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, email, full_name, created_at, updated_at FROM profiles WHERE id=%s",
                (user_id,),
            )
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_profiles(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, email, full_name, created_at, updated_at FROM profiles ORDER BY created_at DESC"
            )
            return [_to_profile(r) for r in fetchall(cur)]

    def update_profile(self, *, user_id: str, full_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE profiles SET full_name=%s WHERE id=%s", (full_name, user_id))
            return cur.rowcount > 0

    def get_roles(self, user_id: str) -> FrozenSet[AppRole]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s", (user_id,))
            return frozenset(AppRole(r["role"]) for r in fetchall(cur))

    def add_role(self, *, user_id: str, role: AppRole) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO user_roles (id, user_id, role) VALUES (%s, %s, %s)",
                (str(uuid.uuid4()), user_id, role.value),
            )
            return cur.rowcount > 0
