"""Access policy: the single place that decides who may do what.

Every predicate is pure and total: it reads only the actor and entity passed
in, never raises for decision logic and returns False for an anonymous actor.
Missing ids never match each other, so incomplete records fail closed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from ..core.enums import EventStatus
from ..events.model import AbsenceEvent
from ..groups.model import Group
from ..reference.model import REFERENCE_TYPES, Company
from ..users.model import User
from .actor import Actor

# User fields grouped by who may change them.
ROLE_FIELDS = frozenset({"role", "group_id", "started_at"})
MANAGED_FIELDS = frozenset({"is_manager", "active"})
SELF_FIELDS = frozenset({"password"})
PROFILE_FIELDS = frozenset({"name", "email", "uf"})
USER_FIELDS = ROLE_FIELDS | MANAGED_FIELDS | SELF_FIELDS | PROFILE_FIELDS


def _same(a: Any, b: Any) -> bool:
    return a is not None and b is not None and a == b


@dataclass(frozen=True)
class EventScope:
    """Listing filter for events; both None means "every event"."""

    owner_id: Optional[int] = None
    group_id: Optional[int] = None


class AccessPolicy:
    # -- building blocks -------------------------------------------------

    @staticmethod
    def _governs_group(actor: Actor, group_id: Optional[int]) -> bool:
        return actor.has_group_authority and _same(actor.group_id, group_id)

    @staticmethod
    def _is_self(actor: Actor, person_id: Optional[int]) -> bool:
        return _same(actor.actor_id, person_id)

    # -- viewing ---------------------------------------------------------

    def can_view_entity(self, actor: Optional[Actor], entity: Any) -> bool:
        if actor is None or entity is None:
            return False
        if actor.is_staff_admin:
            return True
        if isinstance(entity, REFERENCE_TYPES):
            return True

        if isinstance(entity, AbsenceEvent):
            return self._is_self(actor, entity.owner_id) or self._governs_group(actor, entity.owner_group_id)
        if isinstance(entity, User):
            return self._is_self(actor, entity.cpf) or self._governs_group(actor, entity.group_id)
        if isinstance(entity, (Group, Company)):
            return actor.has_group_authority
        return False

    def event_scope(self, actor: Optional[Actor]) -> Optional[EventScope]:
        """Which events a listing may return, or None when nothing is visible."""
        if actor is None:
            return None
        if actor.is_staff_admin:
            return EventScope()
        if actor.has_group_authority and actor.group_id is not None:
            return EventScope(group_id=actor.group_id)
        return EventScope(owner_id=actor.actor_id)

    # -- absence events --------------------------------------------------

    def can_create_event_for(
        self, actor: Optional[Actor], owner_id: Optional[int], owner_group_id: Optional[int]
    ) -> bool:
        if actor is None:
            return False
        if actor.is_staff_admin:
            return True
        return self._is_self(actor, owner_id) or self._governs_group(actor, owner_group_id)

    def can_edit_event(self, actor: Optional[Actor], event: Optional[AbsenceEvent]) -> bool:
        if actor is None or event is None:
            return False
        if actor.is_staff_admin:
            return True
        if self._governs_group(actor, event.owner_group_id):
            return True
        # Owners lose edit rights once a decision was made.
        return self._is_self(actor, event.owner_id) and event.status == EventStatus.PENDING

    def can_delete_event(self, actor: Optional[Actor], event: Optional[AbsenceEvent]) -> bool:
        return self.can_edit_event(actor, event)

    def can_approve_event(self, actor: Optional[Actor], event: Optional[AbsenceEvent]) -> bool:
        if actor is None or event is None:
            return False
        if event.status != EventStatus.PENDING:
            return False
        return actor.is_staff_admin or actor.has_group_authority

    def can_reject_event(self, actor: Optional[Actor], event: Optional[AbsenceEvent]) -> bool:
        return self.can_approve_event(actor, event)

    def can_access_approvals(self, actor: Optional[Actor]) -> bool:
        return actor is not None and (actor.is_staff_admin or actor.has_group_authority)

    # -- users -----------------------------------------------------------

    def can_manage_user(self, actor: Optional[Actor], target: Optional[User], fields: Iterable[str] = ()) -> bool:
        """May `actor` change `fields` of `target`?

        With no fields the question is whether the edit screen may be opened
        at all. Unknown field names are denied.
        """
        if actor is None or target is None:
            return False
        if actor.is_staff_admin:
            return True

        requested = frozenset(fields)
        is_self = self._is_self(actor, target.cpf)
        governs = self._governs_group(actor, target.group_id)

        if not requested:
            return governs or is_self
        if not requested <= USER_FIELDS or requested & ROLE_FIELDS:
            return False
        if requested & MANAGED_FIELDS and (is_self or not governs):
            return False
        # Only the account holder sets a new password.
        if requested & SELF_FIELDS and not is_self:
            return False
        return governs or is_self

    def can_delete_user(self, actor: Optional[Actor], target: Optional[User]) -> bool:
        if actor is None or target is None:
            return False
        if actor.is_staff_admin:
            return True
        return self._governs_group(actor, target.group_id) and not self._is_self(actor, target.cpf)

    def can_set_user_active(self, actor: Optional[Actor], target: Optional[User]) -> bool:
        return self.can_delete_user(actor, target)

    def can_create_user_for(self, actor: Optional[Actor], target_group_id: Optional[int]) -> bool:
        """Predicate half of the create-user contract.

        Any manager passes here; callers must also restrict the group to
        `selectable_groups`, which for a manager is only their own group.
        """
        if actor is None:
            return False
        return actor.is_staff_admin or actor.has_group_authority

    def selectable_groups(self, actor: Optional[Actor], groups: Sequence[Group]) -> List[Group]:
        if actor is None:
            return []
        if actor.is_staff_admin:
            return list(groups)
        if not actor.has_group_authority:
            return []
        return [g for g in groups if _same(g.group_id, actor.group_id)]

    # -- admin-only gates ------------------------------------------------

    def can_manage_group(self, actor: Optional[Actor]) -> bool:
        return actor is not None and actor.is_staff_admin

    def can_manage_empresa(self, actor: Optional[Actor]) -> bool:
        return actor is not None and actor.is_staff_admin

    def can_manage_config(self, actor: Optional[Actor]) -> bool:
        return actor is not None and actor.is_staff_admin

    def can_view_reports(self, actor: Optional[Actor]) -> bool:
        return actor is not None and actor.is_staff_admin
