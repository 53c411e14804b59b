from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.enums import Role
from .actor import Actor
from .policy import AccessPolicy


@dataclass(frozen=True)
class NavItem:
    name: str
    href: str
    required_role: Optional[Role] = None
    require_approver: bool = False
    children: Tuple["NavItem", ...] = ()


@dataclass(frozen=True)
class NavSection:
    title: str
    items: Tuple[NavItem, ...] = field(default_factory=tuple)


NAVIGATION: Tuple[NavSection, ...] = (
    NavSection(
        "Main",
        (
            NavItem("Dashboard", "/dashboard"),
            NavItem("Calendar", "/calendar"),
        ),
    ),
    NavSection(
        "Events",
        (
            NavItem("My events", "/events"),
            NavItem("Request event", "/events/new"),
            NavItem("Vacations", "/vacations"),
            NavItem("Approvals", "/approvals", require_approver=True),
        ),
    ),
    NavSection(
        "Management",
        (
            NavItem(
                "Users",
                "/users",
                children=(
                    NavItem("List users", "/users"),
                    NavItem("New user", "/users/new", required_role=Role.STAFF_ADMIN),
                ),
            ),
            NavItem(
                "Groups",
                "/groups",
                required_role=Role.STAFF_ADMIN,
                children=(
                    NavItem("List groups", "/groups"),
                    NavItem("New group", "/groups/new"),
                ),
            ),
            NavItem("Company", "/company", required_role=Role.STAFF_ADMIN),
            NavItem("Settings", "/config", required_role=Role.STAFF_ADMIN),
            NavItem("Reports", "/reports", required_role=Role.STAFF_ADMIN),
        ),
    ),
    NavSection("Account", (NavItem("My profile", "/profile"),)),
)


def _allowed(policy: AccessPolicy, actor: Actor, item: NavItem) -> bool:
    if item.required_role is not None and actor.role != item.required_role:
        return False
    if item.require_approver and not policy.can_access_approvals(actor):
        return False
    return True


def _filter_items(policy: AccessPolicy, actor: Actor, items) -> Tuple[NavItem, ...]:
    out: List[NavItem] = []
    for item in items:
        if not _allowed(policy, actor, item):
            continue
        children = _filter_items(policy, actor, item.children)
        out.append(NavItem(item.name, item.href, item.required_role, item.require_approver, children))
    return tuple(out)


def visible_navigation(
    policy: AccessPolicy, actor: Optional[Actor], sections: Tuple[NavSection, ...] = NAVIGATION
) -> List[NavSection]:
    """Menu sections the actor may see; empty sections are dropped."""
    if actor is None:
        return []
    out: List[NavSection] = []
    for section in sections:
        items = _filter_items(policy, actor, section.items)
        if items:
            out.append(NavSection(section.title, items))
    return out


def navigation_as_dicts(sections: List[NavSection]) -> List[dict]:
    def _item(item: NavItem) -> dict:
        return {"name": item.name, "href": item.href, "children": [_item(c) for c in item.children]}

    return [{"title": s.title, "items": [_item(i) for i in s.items]} for s in sections]
