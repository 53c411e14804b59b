from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..api.client import ApiClient
from ..api.wire import unwrap_list
from ..common.datetime_utils import parse_iso_date
from ..core.enums import HolidayScope
from ..core.exceptions import ApiError
from .model import AbsenceType, Company, FederativeUnit, Holiday, Shift
from .repository import ReferenceRepository

_HOLIDAY_PATHS = {
    HolidayScope.NATIONAL: "/api/feriados/nacionais",
    HolidayScope.STATE: "/api/feriados/estaduais",
}

_COMPANY_FIELD_TO_WIRE = {
    "name": "nome",
    "address": "endereco",
    "phone": "telefone",
    "email": "email",
    "active": "ativa",
}


def _absence_type(row: Mapping[str, Any]) -> AbsenceType:
    return AbsenceType(
        absence_type_id=int(row.get("id_tipo_ausencia") or row.get("id") or 0),
        description=row.get("descricao_ausencia") or row.get("descricao") or "",
        uses_shift=bool(row.get("usa_turno", False)),
    )


def _shift(row: Mapping[str, Any]) -> Shift:
    return Shift(shift_id=int(row.get("id") or 0), description=row.get("descricao_ausencia") or row.get("descricao") or "")


def _uf(row: Mapping[str, Any]) -> FederativeUnit:
    return FederativeUnit(code=int(row.get("cod_uf") or 0), uf=str(row.get("uf") or ""))


def _holiday(row: Mapping[str, Any], scope: HolidayScope) -> Holiday:
    return Holiday(
        holiday_date=parse_iso_date(row["data_feriado"]),
        uf=str(row.get("uf") or ""),
        description=row.get("descricao_feriado") or "",
        scope=scope,
    )


def _company(row: Mapping[str, Any]) -> Company:
    return Company(
        cnpj=int(row["cnpj"]),
        name=row.get("nome") or "",
        address=row.get("endereco") or "",
        phone=row.get("telefone") or "",
        email=row.get("email") or "",
        active=bool(row.get("ativa", True)),
        total_groups=int(row.get("total_grupos") or 0),
    )


class ApiReferenceRepository(ReferenceRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_absence_types(self) -> Sequence[AbsenceType]:
        return [_absence_type(r) for r in unwrap_list(self._client.get("/api/tipos-ausencia"), "tipos_ausencia")]

    def create_absence_type(self, *, description: str, uses_shift: bool) -> AbsenceType:
        row = self._client.post("/api/tipos-ausencia", {"descricao_ausencia": description, "usa_turno": bool(uses_shift)})
        return _absence_type(row)

    def list_shifts(self) -> Sequence[Shift]:
        return [_shift(r) for r in unwrap_list(self._client.get("/api/turnos"), "turnos")]

    def create_shift(self, *, description: str) -> Shift:
        return _shift(self._client.post("/api/turnos", {"descricao_ausencia": description}))

    def list_ufs(self) -> Sequence[FederativeUnit]:
        return [_uf(r) for r in unwrap_list(self._client.get("/api/ufs"), "ufs")]

    def create_uf(self, *, code: int, uf: str) -> FederativeUnit:
        return _uf(self._client.post("/api/ufs", {"cod_uf": int(code), "uf": uf}))

    def list_holidays(self, *, scope: HolidayScope, uf: Optional[str] = None) -> Sequence[Holiday]:
        data = self._client.get(_HOLIDAY_PATHS[scope], params={"uf": uf})
        return [_holiday(r, scope) for r in unwrap_list(data, "feriados")]

    def create_holiday(self, holiday: Holiday) -> Holiday:
        payload = {
            "data_feriado": holiday.holiday_date.isoformat(),
            "uf": holiday.uf,
            "descricao_feriado": holiday.description,
        }
        return _holiday(self._client.post(_HOLIDAY_PATHS[holiday.scope], payload), holiday.scope)

    def get_company(self, cnpj: int) -> Optional[Company]:
        try:
            row = self._client.get(f"/api/empresas/{int(cnpj)}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return _company(row) if row else None

    def list_companies(self) -> Sequence[Company]:
        return [_company(r) for r in unwrap_list(self._client.get("/api/empresas"), "empresas")]

    def update_company(self, cnpj: int, changes: Mapping[str, Any]) -> Company:
        payload = {}
        for key, value in changes.items():
            if key not in _COMPANY_FIELD_TO_WIRE:
                raise ValueError(f"Unknown company field: {key}")
            payload[_COMPANY_FIELD_TO_WIRE[key]] = value
        return _company(self._client.put(f"/api/empresas/{int(cnpj)}", payload))
