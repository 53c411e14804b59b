from dataclasses import replace
from datetime import date

import pytest

from src.absence_dashboard.absence_dashboard.access.actor import Actor
from src.absence_dashboard.absence_dashboard.access.policy import AccessPolicy
from src.absence_dashboard.absence_dashboard.core.enums import HolidayScope, Role
from src.absence_dashboard.absence_dashboard.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ValidationError,
)
from src.absence_dashboard.absence_dashboard.reference.model import (
    AbsenceType,
    Company,
    FederativeUnit,
    Holiday,
)
from src.absence_dashboard.absence_dashboard.reference.service import ReferenceService


class FakeReferenceRepo:
    def __init__(self):
        self.absence_types = [AbsenceType(absence_type_id=1, description="Vacation")]
        self.ufs = []
        self.holidays = []
        self.company = Company(cnpj=123, name="ACME")

    def list_absence_types(self):
        return self.absence_types

    def create_absence_type(self, *, description, uses_shift):
        item = AbsenceType(absence_type_id=len(self.absence_types) + 1, description=description, uses_shift=uses_shift)
        self.absence_types.append(item)
        return item

    def list_ufs(self):
        return self.ufs

    def create_uf(self, *, code, uf):
        item = FederativeUnit(code=code, uf=uf)
        self.ufs.append(item)
        return item

    def list_holidays(self, *, scope, uf=None):
        return [h for h in self.holidays if h.scope == scope and (uf is None or h.uf == uf)]

    def create_holiday(self, holiday):
        self.holidays.append(holiday)
        return holiday

    def get_company(self, cnpj):
        return self.company if cnpj == self.company.cnpj else None

    def list_companies(self):
        return [self.company]

    def update_company(self, cnpj, changes):
        self.company = replace(self.company, **dict(changes))
        return self.company


HR = Actor(actor_id=1, role=Role.STAFF_ADMIN)
MANAGER = Actor(actor_id=200, role=Role.REGULAR, is_manager=True, group_id=2)
REGULAR = Actor(actor_id=100, role=Role.REGULAR, group_id=2)


def _svc():
    repo = FakeReferenceRepo()
    return ReferenceService(repo, AccessPolicy()), repo


def test_everyone_reads_reference_tables():
    svc, _ = _svc()
    assert [t.description for t in svc.list_absence_types(REGULAR)] == ["Vacation"]
    with pytest.raises(AuthenticationError):
        svc.list_absence_types(None)


def test_only_hr_changes_settings():
    svc, _ = _svc()
    assert svc.create_absence_type(HR, description="Sick leave", uses_shift=True).uses_shift is True
    with pytest.raises(AuthorizationError):
        svc.create_absence_type(MANAGER, description="Party")


def test_uf_codes_are_two_letters():
    svc, _ = _svc()
    assert svc.create_uf(HR, code=35, uf="sp").uf == "SP"
    with pytest.raises(ValidationError):
        svc.create_uf(HR, code=36, uf="SAO")


def test_holidays_are_filtered_by_scope():
    svc, _ = _svc()
    svc.create_holiday(HR, holiday_date=date(2026, 1, 1), uf="br", description="New year")
    svc.create_holiday(
        HR, holiday_date=date(2026, 1, 25), uf="SP", description="City anniversary", scope=HolidayScope.STATE
    )

    national = svc.list_holidays(REGULAR)
    assert [h.description for h in national] == ["New year"]
    assert national[0].uf == "BR"
    assert [h.description for h in svc.list_holidays(REGULAR, scope=HolidayScope.STATE, uf="SP")] == [
        "City anniversary"
    ]


def test_company_record_access():
    svc, _ = _svc()
    assert svc.get_company(MANAGER).name == "ACME"
    with pytest.raises(AuthorizationError):
        svc.get_company(REGULAR)
    with pytest.raises(ValidationError):
        svc.get_company(HR, 999)

    assert svc.update_company(HR, 123, {"phone": "555"}).phone == "555"
    with pytest.raises(AuthorizationError):
        svc.update_company(MANAGER, 123, {"phone": "1"})
    with pytest.raises(ValidationError):
        svc.update_company(HR, 123, {"cnpj": 1})
