from src.absence_dashboard.absence_dashboard.access.actor import Actor
from src.absence_dashboard.absence_dashboard.access.navigation import navigation_as_dicts, visible_navigation
from src.absence_dashboard.absence_dashboard.access.policy import AccessPolicy
from src.absence_dashboard.absence_dashboard.core.enums import Role


def _hrefs(sections):
    out = []
    for section in sections:
        for item in section.items:
            out.append(item.href)
            out.extend(child.href for child in item.children)
    return out


def test_regular_user_sees_only_self_service_entries():
    actor = Actor(actor_id=100, role=Role.REGULAR, is_manager=False, group_id=2)
    hrefs = _hrefs(visible_navigation(AccessPolicy(), actor))

    assert "/events" in hrefs
    assert "/profile" in hrefs
    assert "/approvals" not in hrefs
    assert "/groups" not in hrefs
    assert "/users/new" not in hrefs


def test_manager_flag_unlocks_approvals_but_not_admin_pages():
    actor = Actor(actor_id=200, role=Role.REGULAR, is_manager=True, group_id=2)
    hrefs = _hrefs(visible_navigation(AccessPolicy(), actor))

    assert "/approvals" in hrefs
    assert "/company" not in hrefs
    assert "/config" not in hrefs


def test_staff_admin_sees_everything():
    actor = Actor(actor_id=1, role=Role.STAFF_ADMIN)
    hrefs = _hrefs(visible_navigation(AccessPolicy(), actor))

    for href in ["/approvals", "/users/new", "/groups", "/groups/new", "/company", "/config", "/reports"]:
        assert href in hrefs


def test_anonymous_gets_no_menu():
    assert visible_navigation(AccessPolicy(), None) == []


def test_navigation_as_dicts_keeps_children():
    actor = Actor(actor_id=1, role=Role.STAFF_ADMIN)
    data = navigation_as_dicts(visible_navigation(AccessPolicy(), actor))

    management = next(s for s in data if s["title"] == "Management")
    users = next(i for i in management["items"] if i["href"] == "/users")
    assert [c["href"] for c in users["children"]] == ["/users", "/users/new"]
