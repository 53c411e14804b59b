from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from ..access.actor import Actor, require_actor
from ..access.policy import AccessPolicy
from ..common.validators import require_non_empty, require_positive_id
from ..core.enums import EventStatus
from ..core.exceptions import AuthorizationError, InconsistentDataError, ValidationError
from ..users.repository import UserRepository
from . import lifecycle
from .model import AbsenceEvent, DateRange, EventDraft
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    """Use cases around absence events; every action asks the access policy first."""

    def __init__(self, events: EventRepository, users: UserRepository, policy: AccessPolicy):
        self._events = events
        self._users = users
        self._policy = policy

    def _load(self, event_id: int) -> AbsenceEvent:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise ValidationError("Event not found")
        return event

    def _deny(self, actor: Actor, action: str, event_id) -> None:
        logger.info("denied: actor=%s action=%s event=%s", actor.actor_id, action, event_id)
        raise AuthorizationError("You are not allowed to perform this action")

    @staticmethod
    def _draft(*, owner_id: int, start_date: date, end_date: date, absence_type_id, uf: str) -> EventDraft:
        return EventDraft(
            owner_id=int(owner_id),
            date_range=DateRange(start_date, end_date),
            absence_type_id=require_positive_id(absence_type_id, "Absence type"),
            uf=require_non_empty(uf, "UF"),
        )

    # -- queries ---------------------------------------------------------

    def list_visible(self, actor: Optional[Actor], *, status: Optional[EventStatus] = None) -> List[AbsenceEvent]:
        actor = require_actor(actor)
        scope = self._policy.event_scope(actor)
        if scope is None:
            return []
        rows = self._events.list_events(owner_id=scope.owner_id, group_id=scope.group_id, status=status)
        return [e for e in rows if self._policy.can_view_entity(actor, e)]

    def list_pending_approvals(self, actor: Optional[Actor]) -> List[AbsenceEvent]:
        actor = require_actor(actor)
        if not self._policy.can_access_approvals(actor):
            self._deny(actor, "list_approvals", None)
        return [
            e for e in self.list_visible(actor, status=EventStatus.PENDING) if self._policy.can_approve_event(actor, e)
        ]

    def get(self, actor: Optional[Actor], event_id: int) -> AbsenceEvent:
        actor = require_actor(actor)
        event = self._load(event_id)
        if not self._policy.can_view_entity(actor, event):
            self._deny(actor, "view", event_id)
        return event

    # -- commands --------------------------------------------------------

    def create(
        self,
        actor: Optional[Actor],
        *,
        owner_id: int,
        start_date: date,
        end_date: date,
        absence_type_id: int,
        uf: str,
    ) -> AbsenceEvent:
        actor = require_actor(actor)
        owner = self._users.get_by_cpf(require_positive_id(owner_id, "User"))
        if not owner:
            raise ValidationError("User not found")
        if not owner.active:
            raise ValidationError("Cannot file an absence for an inactive user")
        if not self._policy.can_create_event_for(actor, owner.cpf, owner.group_id):
            self._deny(actor, "create", None)

        draft = self._draft(
            owner_id=owner.cpf, start_date=start_date, end_date=end_date, absence_type_id=absence_type_id, uf=uf
        )
        event = self._events.create(draft)
        logger.info("event %s created by %s for %s", event.event_id, actor.actor_id, owner.cpf)
        return event

    def update(
        self,
        actor: Optional[Actor],
        event_id: int,
        *,
        start_date: date,
        end_date: date,
        absence_type_id: int,
        uf: str,
    ) -> AbsenceEvent:
        actor = require_actor(actor)
        event = self._load(event_id)
        if not self._policy.can_edit_event(actor, event):
            self._deny(actor, "edit", event_id)

        # The owner of an event never changes; a different person means a new event.
        draft = self._draft(
            owner_id=event.owner_id, start_date=start_date, end_date=end_date, absence_type_id=absence_type_id, uf=uf
        )
        updated = self._events.update(event.event_id, draft)
        if updated.status != event.status:
            raise InconsistentDataError(f"Editing event {event.event_id} changed its status")
        return updated

    def delete(self, actor: Optional[Actor], event_id: int) -> None:
        actor = require_actor(actor)
        event = self._load(event_id)
        if not self._policy.can_delete_event(actor, event):
            self._deny(actor, "delete", event_id)
        if not self._events.delete_by_id(event.event_id):
            raise ValidationError("Failed to delete event")
        logger.info("event %s deleted by %s", event.event_id, actor.actor_id)

    def approve(self, actor: Optional[Actor], event_id: int, note: str = "") -> AbsenceEvent:
        return self._decide(actor, event_id, EventStatus.APPROVED, note)

    def reject(self, actor: Optional[Actor], event_id: int, note: str = "") -> AbsenceEvent:
        return self._decide(actor, event_id, EventStatus.REJECTED, note)

    def _decide(self, actor: Optional[Actor], event_id: int, target: EventStatus, note: str) -> AbsenceEvent:
        actor = require_actor(actor)
        if not self._policy.can_access_approvals(actor):
            self._deny(actor, target.value, event_id)
        event = self._load(event_id)
        if not event.is_pending:
            raise ValidationError("Event has already been decided")
        if not self._policy.can_approve_event(actor, event):
            self._deny(actor, target.value, event_id)

        lifecycle.decide(event, target, decided_by=actor.actor_id)
        stored = self._events.decide(
            event_id=event.event_id,
            status=target,
            decided_by=actor.actor_id,
            note=(note or "").strip() or None,
        )
        lifecycle.ensure_decided(stored, target)
        logger.info("event %s %s by %s", event.event_id, target.value, actor.actor_id)
        return stored
