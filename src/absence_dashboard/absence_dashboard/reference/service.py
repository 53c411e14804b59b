from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Mapping, Optional

from ..access.actor import Actor, require_actor
from ..access.policy import AccessPolicy
from ..common.validators import require_non_empty, require_positive_id
from ..core.constants import UF_CODE_LENGTH
from ..core.enums import HolidayScope
from ..core.exceptions import AuthorizationError, ValidationError
from .model import AbsenceType, Company, FederativeUnit, Holiday, Shift
from .repository import ReferenceRepository

logger = logging.getLogger(__name__)

COMPANY_FIELDS = frozenset({"name", "address", "phone", "email", "active"})


class ReferenceService:
    """Use case: reference tables (readable by everyone) and the company record."""

    def __init__(self, reference: ReferenceRepository, policy: AccessPolicy):
        self._reference = reference
        self._policy = policy

    def _require_config(self, actor: Optional[Actor]) -> Actor:
        actor = require_actor(actor)
        if not self._policy.can_manage_config(actor):
            logger.info("denied: actor=%s action=manage_config", actor.actor_id)
            raise AuthorizationError("Only HR can change settings")
        return actor

    # Absence types
    def list_absence_types(self, actor: Optional[Actor]) -> List[AbsenceType]:
        require_actor(actor)
        return list(self._reference.list_absence_types())

    def create_absence_type(self, actor: Optional[Actor], *, description: str, uses_shift: bool = False) -> AbsenceType:
        self._require_config(actor)
        return self._reference.create_absence_type(
            description=require_non_empty(description, "Description"), uses_shift=bool(uses_shift)
        )

    # Shifts
    def list_shifts(self, actor: Optional[Actor]) -> List[Shift]:
        require_actor(actor)
        return list(self._reference.list_shifts())

    def create_shift(self, actor: Optional[Actor], *, description: str) -> Shift:
        self._require_config(actor)
        return self._reference.create_shift(description=require_non_empty(description, "Description"))

    # UFs
    def list_ufs(self, actor: Optional[Actor]) -> List[FederativeUnit]:
        require_actor(actor)
        return list(self._reference.list_ufs())

    def create_uf(self, actor: Optional[Actor], *, code: int, uf: str) -> FederativeUnit:
        self._require_config(actor)
        uf = require_non_empty(uf, "UF").upper()
        if len(uf) != UF_CODE_LENGTH:
            raise ValidationError(f"UF must have {UF_CODE_LENGTH} letters")
        return self._reference.create_uf(code=require_positive_id(code, "UF code"), uf=uf)

    # Holidays
    def list_holidays(
        self, actor: Optional[Actor], *, scope: HolidayScope = HolidayScope.NATIONAL, uf: Optional[str] = None
    ) -> List[Holiday]:
        require_actor(actor)
        return list(self._reference.list_holidays(scope=scope, uf=uf))

    def create_holiday(
        self,
        actor: Optional[Actor],
        *,
        holiday_date: date,
        uf: str,
        description: str,
        scope: HolidayScope = HolidayScope.NATIONAL,
    ) -> Holiday:
        self._require_config(actor)
        holiday = Holiday(
            holiday_date=holiday_date,
            uf=require_non_empty(uf, "UF").upper(),
            description=require_non_empty(description, "Description"),
            scope=scope,
        )
        return self._reference.create_holiday(holiday)

    # Company
    def get_company(self, actor: Optional[Actor], cnpj: Optional[int] = None) -> Company:
        actor = require_actor(actor)
        if cnpj is None:
            companies = self._reference.list_companies()
            company = companies[0] if companies else None
        else:
            company = self._reference.get_company(int(cnpj))
        if not company:
            raise ValidationError("Company not found")
        if not self._policy.can_view_entity(actor, company):
            raise AuthorizationError("You are not allowed to view the company record")
        return company

    def update_company(self, actor: Optional[Actor], cnpj: int, changes: Mapping[str, Any]) -> Company:
        actor = require_actor(actor)
        if not self._policy.can_manage_empresa(actor):
            logger.info("denied: actor=%s action=manage_company", actor.actor_id)
            raise AuthorizationError("Only HR can change the company record")
        unknown = set(changes) - COMPANY_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        if not changes:
            raise ValidationError("Nothing to update")
        clean = dict(changes)
        if "name" in clean:
            clean["name"] = require_non_empty(clean["name"], "Company name")
        return self._reference.update_company(int(cnpj), clean)
