from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for managed user records."""

    def get_by_cpf(self, cpf: int) -> Optional[User]:
        raise NotImplementedError

    def list_users(
        self,
        *,
        group_id: Optional[int] = None,
        role: Optional[Role] = None,
        active_only: Optional[bool] = None,
    ) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, user: User, password: str) -> User:
        raise NotImplementedError

    def update_user(self, cpf: int, changes: Mapping[str, Any]) -> User:
        raise NotImplementedError

    def delete_by_cpf(self, cpf: int) -> bool:
        raise NotImplementedError
