from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Group:
    group_id: int
    name: str
    company_id: Optional[int]
    description: str = ""
    phone: Optional[str] = None
    active: bool = True
    company_name: Optional[str] = None
    total_users: int = 0
