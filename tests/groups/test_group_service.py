from dataclasses import replace

import pytest

from src.absence_dashboard.absence_dashboard.access.actor import Actor
from src.absence_dashboard.absence_dashboard.access.policy import AccessPolicy
from src.absence_dashboard.absence_dashboard.core.enums import Role
from src.absence_dashboard.absence_dashboard.core.exceptions import AuthorizationError, ValidationError
from src.absence_dashboard.absence_dashboard.groups.model import Group
from src.absence_dashboard.absence_dashboard.groups.service import GroupService


class FakeGroupsRepo:
    def __init__(self):
        self._groups = {
            2: Group(group_id=2, name="Ops", company_id=1),
            3: Group(group_id=3, name="Sales", company_id=1),
        }

    def get_by_id(self, group_id):
        return self._groups.get(int(group_id))

    def list_groups(self, *, company_id=None, active_only=None):
        return list(self._groups.values())

    def create_group(self, data):
        gid = max(self._groups) + 1
        self._groups[gid] = Group(group_id=gid, company_id=data.get("company_id"), name=data["name"])
        return self._groups[gid]

    def update_group(self, group_id, changes):
        self._groups[group_id] = replace(self._groups[group_id], **dict(changes))
        return self._groups[group_id]

    def delete_by_id(self, group_id):
        return self._groups.pop(int(group_id), None) is not None


HR = Actor(actor_id=1, role=Role.STAFF_ADMIN)
MANAGER = Actor(actor_id=200, role=Role.MANAGER, group_id=2)
REGULAR = Actor(actor_id=100, role=Role.REGULAR, group_id=2)


def test_hr_manages_groups():
    repo = FakeGroupsRepo()
    svc = GroupService(repo, AccessPolicy())

    created = svc.create(HR, {"name": " Finance ", "company_id": 1})
    assert created.name == "Finance"
    assert svc.update(HR, created.group_id, {"description": "money"}).description == "money"
    assert svc.set_active(HR, created.group_id, False).active is False
    svc.delete(HR, created.group_id)
    assert repo.get_by_id(created.group_id) is None


def test_managers_can_read_but_not_change_groups():
    svc = GroupService(FakeGroupsRepo(), AccessPolicy())
    assert len(svc.list_visible(MANAGER)) == 2
    assert svc.get(MANAGER, 3).name == "Sales"

    with pytest.raises(AuthorizationError):
        svc.create(MANAGER, {"name": "Mine"})
    with pytest.raises(AuthorizationError):
        svc.delete(MANAGER, 2)


def test_regular_users_do_not_see_groups():
    svc = GroupService(FakeGroupsRepo(), AccessPolicy())
    assert svc.list_visible(REGULAR) == []
    with pytest.raises(AuthorizationError):
        svc.get(REGULAR, 2)


def test_group_input_validation():
    svc = GroupService(FakeGroupsRepo(), AccessPolicy())
    with pytest.raises(ValidationError):
        svc.create(HR, {"description": "no name"})
    with pytest.raises(ValidationError):
        svc.update(HR, 2, {"owner": 5})
    with pytest.raises(ValidationError):
        svc.update(HR, 99, {"name": "Ghost"})
