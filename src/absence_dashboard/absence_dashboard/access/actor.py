from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..users.model import User


@dataclass(frozen=True)
class Actor:
    """The authenticated principal evaluated by the access policy.

    `role` is None when the stored role is missing or unknown; the policy then
    grants no special authority. `is_manager` is independent of `role`.
    """

    actor_id: int
    role: Optional[Role]
    is_manager: bool = False
    group_id: Optional[int] = None

    @property
    def is_staff_admin(self) -> bool:
        return self.role == Role.STAFF_ADMIN

    @property
    def has_group_authority(self) -> bool:
        return self.role == Role.MANAGER or bool(self.is_manager)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def actor_from_session(data: Mapping[str, Any]) -> Optional[Actor]:
    """Build the actor stored in the Flask session after login.

    Returns None for anonymous or unreadable sessions.
    """
    actor_id = _optional_int(data.get("user_id"))
    if actor_id is None:
        return None
    return Actor(
        actor_id=actor_id,
        role=Role.parse(data.get("role")),
        is_manager=bool(data.get("is_manager", False)),
        group_id=_optional_int(data.get("group_id")),
    )


def actor_from_user(user: User) -> Actor:
    return Actor(
        actor_id=user.cpf,
        role=user.role,
        is_manager=user.is_manager,
        group_id=user.group_id,
    )


def require_actor(actor: Optional[Actor]) -> Actor:
    """Services call this first; a missing actor means an unauthenticated caller."""
    if actor is None:
        raise AuthenticationError("Please log in to continue")
    return actor
