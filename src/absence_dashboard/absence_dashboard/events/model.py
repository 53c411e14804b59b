from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.validators import require_date_order
from ..core.enums import EventStatus


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self):
        require_date_order(self.start, self.end)

    @property
    def total_days(self) -> int:
        """Inclusive day count (a single-day absence counts as 1)."""
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class AbsenceEvent:
    """Domain entity: an absence/leave request.

    `owner_id` is the person the absence belongs to and `owner_group_id` the
    group that person belongs to; the latter scopes manager authority.
    """

    event_id: int
    owner_id: int
    owner_group_id: Optional[int]
    status: EventStatus
    date_range: DateRange
    absence_type_id: int
    uf: Optional[str] = None
    owner_name: Optional[str] = None
    absence_type_desc: Optional[str] = None
    decided_by: Optional[int] = None
    decided_by_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == EventStatus.PENDING


@dataclass(frozen=True)
class EventDraft:
    """Fields submitted when creating or editing an event."""

    owner_id: int
    date_range: DateRange
    absence_type_id: int
    uf: str
