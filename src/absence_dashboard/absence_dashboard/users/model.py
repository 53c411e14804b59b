from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a managed user record (not the authenticated actor).

    Note: plain data object; the remote API is the system of record.
    """

    cpf: int
    name: str
    email: str
    role: Optional[Role]
    group_id: Optional[int]
    is_manager: bool = False
    active: bool = True
    group_name: Optional[str] = None
    uf: Optional[str] = None
    started_at: Optional[date] = None
