from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EventStatus
from .model import AbsenceEvent, EventDraft


class EventRepository(Protocol):
    """Repository interface for absence events.

    Note (DIP): services depend on this interface, not on the remote API client.
    """

    def get_by_id(self, event_id: int) -> Optional[AbsenceEvent]:
        raise NotImplementedError

    def list_events(
        self,
        *,
        owner_id: Optional[int] = None,
        group_id: Optional[int] = None,
        status: Optional[EventStatus] = None,
    ) -> Sequence[AbsenceEvent]:
        raise NotImplementedError

    def create(self, draft: EventDraft) -> AbsenceEvent:
        raise NotImplementedError

    def update(self, event_id: int, draft: EventDraft) -> AbsenceEvent:
        raise NotImplementedError

    def delete_by_id(self, event_id: int) -> bool:
        raise NotImplementedError

    def decide(
        self,
        *,
        event_id: int,
        status: EventStatus,
        decided_by: int,
        note: Optional[str] = None,
    ) -> AbsenceEvent:
        raise NotImplementedError
