from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import HolidayScope


@dataclass(frozen=True)
class AbsenceType:
    absence_type_id: int
    description: str
    uses_shift: bool = False


@dataclass(frozen=True)
class Shift:
    shift_id: int
    description: str


@dataclass(frozen=True)
class FederativeUnit:
    code: int
    uf: str


@dataclass(frozen=True)
class Holiday:
    holiday_date: date
    uf: str
    description: str
    scope: HolidayScope = HolidayScope.NATIONAL


@dataclass(frozen=True)
class Company:
    cnpj: int
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    active: bool = True
    total_groups: int = 0


# Reference tables every authenticated actor may read.
REFERENCE_TYPES = (AbsenceType, Shift, FederativeUnit, Holiday)
