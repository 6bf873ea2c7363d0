"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Membership``: enforces the join-request lifecycle
  (NEW -> APPLIED -> JOINED | DECLINED).  ADMIN is granted on trip creation.
- ``UserIdentity`` is the value object stored in a server-side session.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from .enums import MEMBERSHIP_TRANSITIONS, MembershipStatus
from .errors import InvalidStateTransition


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class UserIdentity:
    id: int
    email: str
    name: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "UserIdentity":
        return cls(id=int(data["id"]), email=data["email"], name=data["name"])


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Membership:
    id: Optional[int] = None
    user_id: int = 0
    trip_id: int = 0
    user_name: str = ""
    status: MembershipStatus = MembershipStatus.NEW
    created_at: Optional[datetime] = None

    def transition_to(self, new_status: MembershipStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = MEMBERSHIP_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot move membership from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
