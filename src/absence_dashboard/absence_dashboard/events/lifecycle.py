"""Absence event state machine.

    pending --approve--> approved   (terminal)
    pending --reject---> rejected   (terminal)

Edits and deletes never change the status. There is no way back from a
terminal state; a changed decision must be filed as a new event.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..core.enums import EventStatus
from ..core.exceptions import InconsistentDataError, ValidationError
from .model import AbsenceEvent

DECISIONS = frozenset({EventStatus.APPROVED, EventStatus.REJECTED})


def can_transition(current: EventStatus, target: EventStatus) -> bool:
    return current == EventStatus.PENDING and target in DECISIONS


def decide(
    event: AbsenceEvent,
    target: EventStatus,
    *,
    decided_by: int,
    decided_by_name: Optional[str] = None,
) -> AbsenceEvent:
    """Return a copy of `event` carrying the decision."""
    if target not in DECISIONS:
        raise ValidationError(f"Invalid decision: {target.value}")
    if not can_transition(event.status, target):
        raise ValidationError("Event has already been decided")
    return replace(event, status=target, decided_by=int(decided_by), decided_by_name=decided_by_name)


def ensure_decided(event: AbsenceEvent, target: EventStatus) -> AbsenceEvent:
    """Check that a stored event really ended up in `target`."""
    if event.status != target:
        raise InconsistentDataError(
            f"Event {event.event_id} is {event.status.value} after being {target.value}"
        )
    return event
