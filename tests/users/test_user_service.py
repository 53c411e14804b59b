from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.absence_dashboard.absence_dashboard.access.actor import Actor
from src.absence_dashboard.absence_dashboard.access.policy import AccessPolicy
from src.absence_dashboard.absence_dashboard.core.enums import Role
from src.absence_dashboard.absence_dashboard.core.exceptions import (
    ApiError,
    AuthenticationError,
    AuthorizationError,
    ValidationError,
)
from src.absence_dashboard.absence_dashboard.groups.model import Group
from src.absence_dashboard.absence_dashboard.users.model import User
from src.absence_dashboard.absence_dashboard.users.service import AuthService, UserService


class FakeUsersRepo:
    def __init__(self, users):
        self._users = {u.cpf: u for u in users}
        self.passwords = {}

    def get_by_cpf(self, cpf):
        return self._users.get(int(cpf))

    def list_users(self, *, group_id=None, role=None, active_only=None):
        return [u for u in self._users.values() if group_id is None or u.group_id == group_id]

    def create_user(self, *, user, password):
        self._users[user.cpf] = user
        self.passwords[user.cpf] = password
        return user

    def update_user(self, cpf, changes):
        changes = dict(changes)
        if "password" in changes:
            self.passwords[int(cpf)] = changes.pop("password")
        self._users[int(cpf)] = replace(self._users[int(cpf)], **changes)
        return self._users[int(cpf)]

    def delete_by_cpf(self, cpf):
        return self._users.pop(int(cpf), None) is not None


class FakeGroupsRepo:
    def __init__(self, groups):
        self._groups = groups

    def list_groups(self, *, company_id=None, active_only=None):
        return [g for g in self._groups if not active_only or g.active]


HR = Actor(actor_id=1, role=Role.STAFF_ADMIN, group_id=9)
MANAGER = Actor(actor_id=200, role=Role.REGULAR, is_manager=True, group_id=2)
REGULAR = Actor(actor_id=100, role=Role.REGULAR, group_id=2)


def _setup():
    users = FakeUsersRepo(
        [
            User(cpf=1, name="Helena", email="h@x", role=Role.STAFF_ADMIN, group_id=9),
            User(cpf=100, name="Ana", email="a@x", role=Role.REGULAR, group_id=2),
            User(cpf=200, name="Gil", email="g@x", role=Role.REGULAR, group_id=2, is_manager=True),
            User(cpf=400, name="Rui", email="r@x", role=Role.REGULAR, group_id=3),
        ]
    )
    groups = FakeGroupsRepo(
        [
            Group(group_id=2, name="Ops", company_id=1),
            Group(group_id=3, name="Sales", company_id=1),
            Group(group_id=4, name="Closed", company_id=1, active=False),
        ]
    )
    return UserService(users, groups, AccessPolicy()), users


def _new_account(svc, actor, **overrides):
    data = dict(cpf=777, name="Nina", email="n@x", password="secret1", group_id=2)
    data.update(overrides)
    return svc.create_account(actor, **data)


def test_listing_follows_scope():
    svc, _ = _setup()
    assert {u.cpf for u in svc.list_visible(HR)} == {1, 100, 200, 400}
    assert {u.cpf for u in svc.list_visible(MANAGER)} == {100, 200}
    assert [u.cpf for u in svc.list_visible(REGULAR)] == [100]


def test_selectable_groups_for_manager_is_own_group():
    svc, _ = _setup()
    assert [g.group_id for g in svc.selectable_groups(MANAGER)] == [2]
    assert [g.group_id for g in svc.selectable_groups(HR)] == [2, 3]
    assert svc.selectable_groups(REGULAR) == []


def test_manager_creates_account_in_own_group_only():
    svc, users = _setup()
    created = _new_account(svc, MANAGER)
    assert created.group_id == 2
    assert created.role == Role.REGULAR
    assert users.passwords[777] == "secret1"

    with pytest.raises(AuthorizationError):
        _new_account(svc, MANAGER, cpf=778, group_id=3)


def test_only_hr_assigns_elevated_roles():
    svc, _ = _setup()
    with pytest.raises(AuthorizationError):
        _new_account(svc, MANAGER, role=Role.STAFF_ADMIN)
    assert _new_account(svc, HR, role=Role.MANAGER, group_id=3).role == Role.MANAGER


def test_regular_user_cannot_create_accounts():
    svc, _ = _setup()
    with pytest.raises(AuthorizationError):
        _new_account(svc, REGULAR)


def test_create_account_validation():
    svc, _ = _setup()
    with pytest.raises(ValidationError):
        _new_account(svc, HR, password="123")
    with pytest.raises(ValidationError):
        _new_account(svc, HR, name="  ")
    with pytest.raises(ValidationError):
        _new_account(svc, HR, cpf=100)


def test_user_edits_own_profile_but_not_role():
    svc, _ = _setup()
    assert svc.update(REGULAR, 100, {"name": "Ana Maria"}).name == "Ana Maria"
    with pytest.raises(AuthorizationError):
        svc.update(REGULAR, 100, {"role": "staff_admin"})
    with pytest.raises(AuthorizationError):
        svc.update(REGULAR, 100, {"active": False})


def test_manager_updates_member_flags_but_not_role():
    svc, _ = _setup()
    assert svc.update(MANAGER, 100, {"is_manager": True}).is_manager is True
    with pytest.raises(AuthorizationError):
        svc.update(MANAGER, 100, {"group_id": 3})
    with pytest.raises(AuthorizationError):
        svc.update(MANAGER, 400, {"name": "x"})


def test_hr_changes_role():
    svc, _ = _setup()
    assert svc.update(HR, 100, {"role": "manager"}).role == Role.MANAGER
    with pytest.raises(ValidationError):
        svc.update(HR, 100, {"role": "boss"})


def test_update_rejects_unknown_or_empty_changes():
    svc, _ = _setup()
    with pytest.raises(ValidationError):
        svc.update(HR, 100, {"salary": 1})
    with pytest.raises(ValidationError):
        svc.update(HR, 100, {})


def test_deactivate_and_delete():
    svc, users = _setup()
    assert svc.set_active(MANAGER, 100, False).active is False
    with pytest.raises(AuthorizationError):
        svc.set_active(MANAGER, 200, False)

    with pytest.raises(AuthorizationError):
        svc.delete_user(REGULAR, 100)
    svc.delete_user(HR, 400)
    assert users.get_by_cpf(400) is None


def test_get_hides_other_groups():
    svc, _ = _setup()
    assert svc.get(MANAGER, 100).cpf == 100
    with pytest.raises(AuthorizationError):
        svc.get(MANAGER, 400)
    with pytest.raises(AuthenticationError):
        svc.get(None, 100)


class FakeClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.token = None

    def with_token(self, token):
        self.token = token
        return self

    def post(self, path, payload=None):
        self.calls.append((path, payload))
        if self.error:
            raise self.error
        return self.response


LOGIN_OK = {
    "access_token": "tok-1",
    "usuario": {
        "cpf": "200",
        "nome": "Gil",
        "email": "g@x",
        "tipo_usuario": "comum",
        "flag_gestor": "S",
        "grupo_id": 2,
        "grupo_nome": "Ops",
        "ativo": True,
    },
}


def test_authenticate_builds_session_user():
    client = FakeClient(response=LOGIN_OK)
    session_user = AuthService(client).authenticate(" g@x ", "secret1")

    assert client.calls == [("/api/auth/login", {"email": "g@x", "senha": "secret1"})]
    assert session_user.user_id == 200
    assert session_user.role == Role.REGULAR
    assert session_user.is_manager is True
    assert session_user.group_id == 2
    assert session_user.access_token == "tok-1"


def test_authenticate_rejects_bad_credentials():
    with pytest.raises(AuthenticationError):
        AuthService(FakeClient(error=ApiError("nope", status_code=401))).authenticate("g@x", "bad")
    with pytest.raises(AuthenticationError):
        AuthService(FakeClient(response=LOGIN_OK)).authenticate("", "secret1")
    with pytest.raises(AuthenticationError):
        AuthService(FakeClient(response={"usuario": LOGIN_OK["usuario"]})).authenticate("g@x", "secret1")


def test_authenticate_refuses_inactive_user():
    inactive = {"access_token": "t", "usuario": dict(LOGIN_OK["usuario"], ativo=False)}
    with pytest.raises(AuthenticationError):
        AuthService(FakeClient(response=inactive)).authenticate("g@x", "secret1")


def test_authenticate_propagates_api_outage():
    with pytest.raises(ApiError):
        AuthService(FakeClient(error=ApiError("down", status_code=500))).authenticate("g@x", "secret1")


def test_logout_is_best_effort():
    client = FakeClient(error=ApiError("gone", status_code=500))
    AuthService(client).logout("tok-1")
    assert client.token == "tok-1"
    assert client.calls == [("/api/auth/logout", None)]


def test_non_string_profile_values_are_validation_errors():
    svc, _ = _setup()
    with pytest.raises(ValidationError):
        _new_account(svc, HR, name=123)
    with pytest.raises(ValidationError):
        svc.update(REGULAR, 100, {"email": None})


def test_regular_user_cannot_change_own_hire_date():
    svc, _ = _setup()
    with pytest.raises(AuthorizationError):
        svc.update(REGULAR, 100, {"started_at": date(2020, 1, 1)})
    assert svc.update(HR, 100, {"started_at": date(2020, 1, 1)}).started_at == date(2020, 1, 1)


def test_manager_cannot_reset_a_members_password():
    svc, users = _setup()
    with pytest.raises(AuthorizationError):
        svc.update(MANAGER, 100, {"password": "secret99"})
    svc.update(REGULAR, 100, {"password": "secret99"})
    assert users.passwords[100] == "secret99"
