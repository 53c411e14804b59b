from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import HolidayScope
from .model import AbsenceType, Company, FederativeUnit, Holiday, Shift


class ReferenceRepository(Protocol):
    """Reference tables (absence types, shifts, UFs, holidays) and the company record."""

    def list_absence_types(self) -> Sequence[AbsenceType]:
        raise NotImplementedError

    def create_absence_type(self, *, description: str, uses_shift: bool) -> AbsenceType:
        raise NotImplementedError

    def list_shifts(self) -> Sequence[Shift]:
        raise NotImplementedError

    def create_shift(self, *, description: str) -> Shift:
        raise NotImplementedError

    def list_ufs(self) -> Sequence[FederativeUnit]:
        raise NotImplementedError

    def create_uf(self, *, code: int, uf: str) -> FederativeUnit:
        raise NotImplementedError

    def list_holidays(self, *, scope: HolidayScope, uf: Optional[str] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def create_holiday(self, holiday: Holiday) -> Holiday:
        raise NotImplementedError

    def get_company(self, cnpj: int) -> Optional[Company]:
        raise NotImplementedError

    def list_companies(self) -> Sequence[Company]:
        raise NotImplementedError

    def update_company(self, cnpj: int, changes: Mapping[str, Any]) -> Company:
        raise NotImplementedError
