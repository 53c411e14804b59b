"""Translation between the remote API's vocabulary and the domain enums.

The API speaks Portuguese codes (`rh`, `pendente`, `S`/`N`).
"""

from __future__ import annotations

from typing import Any, Optional

from ..core.enums import EventStatus, Role
from ..core.exceptions import InconsistentDataError

_ROLE_FROM_WIRE = {"rh": Role.STAFF_ADMIN, "gestor": Role.MANAGER, "comum": Role.REGULAR}
_ROLE_TO_WIRE = {v: k for k, v in _ROLE_FROM_WIRE.items()}

_STATUS_FROM_WIRE = {
    "pendente": EventStatus.PENDING,
    "aprovado": EventStatus.APPROVED,
    "rejeitado": EventStatus.REJECTED,
}
_STATUS_TO_WIRE = {v: k for k, v in _STATUS_FROM_WIRE.items()}


def role_from_wire(value: Any) -> Optional[Role]:
    """Unknown roles map to None so they carry no authority."""
    if value is None:
        return None
    key = str(value).strip().lower()
    return _ROLE_FROM_WIRE.get(key) or Role.parse(key)


def role_to_wire(role: Role) -> str:
    return _ROLE_TO_WIRE[role]


def status_from_wire(value: Any) -> EventStatus:
    key = str(value or "").strip().lower()
    status = _STATUS_FROM_WIRE.get(key)
    if status is None:
        try:
            status = EventStatus(key)
        except ValueError:
            raise InconsistentDataError(f"Unknown event status from API: {value!r}")
    return status


def status_to_wire(status: EventStatus) -> str:
    return _STATUS_TO_WIRE[status]


def flag_from_wire(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().upper() in {"S", "Y", "TRUE", "1"}


def flag_to_wire(value: bool) -> str:
    return "S" if value else "N"


def optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def unwrap_list(data: Any, key: str) -> list:
    """Some endpoints return a bare list, others wrap it under `key`."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return []
