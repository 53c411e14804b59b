"""Example: ask the access policy directly (no Flask, no API).

The same predicates back the HTTP routes, so a script or another server can
enforce identical rules.
"""

from datetime import date

from src.absence_dashboard.absence_dashboard.access.actor import Actor
from src.absence_dashboard.absence_dashboard.access.navigation import visible_navigation
from src.absence_dashboard.absence_dashboard.access.policy import AccessPolicy
from src.absence_dashboard.absence_dashboard.core.enums import EventStatus, Role
from src.absence_dashboard.absence_dashboard.events.model import AbsenceEvent, DateRange


def main():
    policy = AccessPolicy()
    manager = Actor(actor_id=200, role=Role.REGULAR, is_manager=True, group_id=2)
    event = AbsenceEvent(
        event_id=1,
        owner_id=100,
        owner_group_id=2,
        status=EventStatus.PENDING,
        date_range=DateRange(date(2026, 1, 5), date(2026, 1, 9)),
        absence_type_id=1,
    )

    print("edit:", policy.can_edit_event(manager, event))
    print("approve:", policy.can_approve_event(manager, event))
    for section in visible_navigation(policy, manager):
        print(section.title, [item.name for item in section.items])


if __name__ == "__main__":
    main()
