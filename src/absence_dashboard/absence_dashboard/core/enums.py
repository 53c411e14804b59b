from __future__ import annotations

from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    """User role used by the access policy.

    STAFF_ADMIN is the HR account with full authority, MANAGER holds
    group-scoped authority and REGULAR is limited to its own records.
    """

    STAFF_ADMIN = "staff_admin"
    MANAGER = "manager"
    REGULAR = "regular"

    @classmethod
    def parse(cls, value: Union["Role", str, None]) -> Optional["Role"]:
        """Return the matching role, or None for missing/unknown values."""
        if isinstance(value, Role):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class EventStatus(str, Enum):
    """Approval state of an absence event."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not EventStatus.PENDING


class HolidayScope(str, Enum):
    NATIONAL = "national"
    STATE = "state"
