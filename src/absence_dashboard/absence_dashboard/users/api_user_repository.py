from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..api.client import ApiClient
from ..api.wire import flag_from_wire, flag_to_wire, optional_int, role_from_wire, role_to_wire, unwrap_list
from ..common.datetime_utils import parse_iso_date
from ..core.enums import Role
from ..core.exceptions import ApiError, InconsistentDataError, ValidationError
from .model import User
from .repository import UserRepository

# domain field -> API field
_FIELD_TO_WIRE = {
    "name": "nome",
    "email": "email",
    "role": "tipo_usuario",
    "group_id": "grupo_id",
    "is_manager": "flag_gestor",
    "active": "ativo",
    "uf": "UF",
    "started_at": "inicio_na_empresa",
    "password": "senha",
}


def user_from_wire(row: Mapping[str, Any]) -> User:
    try:
        cpf = int(row["cpf"])
    except (KeyError, TypeError, ValueError) as e:
        raise InconsistentDataError(f"Malformed user record from API: {e}") from e

    started_at = None
    if row.get("inicio_na_empresa"):
        try:
            started_at = parse_iso_date(row["inicio_na_empresa"])
        except ValidationError:
            started_at = None

    return User(
        cpf=cpf,
        name=row.get("nome") or "",
        email=row.get("email") or "",
        role=role_from_wire(row.get("tipo_usuario")),
        group_id=optional_int(row.get("grupo_id")),
        is_manager=flag_from_wire(row.get("flag_gestor")),
        active=bool(row.get("ativo", True)),
        group_name=row.get("grupo_nome"),
        uf=row.get("UF") or row.get("uf"),
        started_at=started_at,
    )


def changes_to_wire(changes: Mapping[str, Any]) -> dict:
    payload: dict = {}
    for key, value in changes.items():
        wire_key = _FIELD_TO_WIRE.get(key)
        if wire_key is None:
            raise ValueError(f"Unknown user field: {key}")
        if key == "role":
            value = role_to_wire(value)
        elif key == "is_manager":
            value = flag_to_wire(bool(value))
        elif isinstance(value, date):
            value = value.isoformat()
        payload[wire_key] = value
    return payload


class ApiUserRepository(UserRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def get_by_cpf(self, cpf: int) -> Optional[User]:
        try:
            row = self._client.get(f"/api/usuarios/{int(cpf)}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        if not row:
            return None
        if isinstance(row, dict) and isinstance(row.get("usuario"), dict):
            row = row["usuario"]
        return user_from_wire(row)

    def list_users(
        self,
        *,
        group_id: Optional[int] = None,
        role: Optional[Role] = None,
        active_only: Optional[bool] = None,
    ) -> Sequence[User]:
        data = self._client.get(
            "/api/usuarios",
            params={
                "grupo_id": group_id,
                "tipo_usuario": role_to_wire(role) if role else None,
                "ativos": str(active_only).lower() if active_only is not None else None,
            },
        )
        return [user_from_wire(row) for row in unwrap_list(data, "usuarios")]

    def create_user(self, *, user: User, password: str) -> User:
        payload = {
            "cpf": int(user.cpf),
            "nome": user.name,
            "email": user.email,
            "senha": password,
            "grupo_id": user.group_id,
            "tipo_usuario": role_to_wire(user.role or Role.REGULAR),
            "flag_gestor": flag_to_wire(user.is_manager),
            "UF": user.uf,
            "inicio_na_empresa": user.started_at.isoformat() if user.started_at else None,
        }
        return user_from_wire(self._client.post("/api/usuarios", payload))

    def update_user(self, cpf: int, changes: Mapping[str, Any]) -> User:
        return user_from_wire(self._client.put(f"/api/usuarios/{int(cpf)}", changes_to_wire(changes)))

    def delete_by_cpf(self, cpf: int) -> bool:
        try:
            self._client.delete(f"/api/usuarios/{int(cpf)}")
        except ApiError as e:
            if e.status_code == 404:
                return False
            raise
        return True
