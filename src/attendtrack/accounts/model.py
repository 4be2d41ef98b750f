from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Account:
    """Login identity. Holds credentials only; display data lives in Profile."""

    user_id: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class Profile:
    user_id: str
    email: str
    full_name: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
