from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..api.client import ApiClient
from ..api.wire import optional_int, unwrap_list
from ..core.exceptions import ApiError, InconsistentDataError
from .model import Group
from .repository import GroupRepository

_FIELD_TO_WIRE = {
    "name": "nome",
    "description": "descricao",
    "company_id": "cnpj_empresa",
    "phone": "telefone",
    "active": "ativo",
}


def group_from_wire(row: Mapping[str, Any]) -> Group:
    try:
        group_id = int(row["id"])
    except (KeyError, TypeError, ValueError) as e:
        raise InconsistentDataError(f"Malformed group record from API: {e}") from e
    return Group(
        group_id=group_id,
        name=row.get("nome") or "",
        company_id=optional_int(row.get("cnpj_empresa")),
        description=row.get("descricao") or "",
        phone=row.get("telefone"),
        active=bool(row.get("ativo", True)),
        company_name=row.get("empresa_nome"),
        total_users=int(row.get("total_usuarios") or 0),
    )


def _to_wire(data: Mapping[str, Any]) -> dict:
    payload = {}
    for key, value in data.items():
        if key not in _FIELD_TO_WIRE:
            raise ValueError(f"Unknown group field: {key}")
        payload[_FIELD_TO_WIRE[key]] = value
    return payload


class ApiGroupRepository(GroupRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def get_by_id(self, group_id: int) -> Optional[Group]:
        try:
            row = self._client.get(f"/api/grupos/{int(group_id)}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return group_from_wire(row) if row else None

    def list_groups(self, *, company_id: Optional[int] = None, active_only: Optional[bool] = None) -> Sequence[Group]:
        data = self._client.get(
            "/api/grupos",
            params={
                "cnpj_empresa": company_id,
                "ativos": str(active_only).lower() if active_only is not None else None,
            },
        )
        return [group_from_wire(row) for row in unwrap_list(data, "grupos")]

    def create_group(self, data: Mapping[str, Any]) -> Group:
        return group_from_wire(self._client.post("/api/grupos", _to_wire(data)))

    def update_group(self, group_id: int, changes: Mapping[str, Any]) -> Group:
        return group_from_wire(self._client.put(f"/api/grupos/{int(group_id)}", _to_wire(changes)))

    def delete_by_id(self, group_id: int) -> bool:
        try:
            self._client.delete(f"/api/grupos/{int(group_id)}")
        except ApiError as e:
            if e.status_code == 404:
                return False
            raise
        return True
