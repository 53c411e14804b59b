from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_groups(self, *, company_id: Optional[int] = None, active_only: Optional[bool] = None) -> Sequence[Group]:
        raise NotImplementedError

    def create_group(self, data: Mapping[str, Any]) -> Group:
        raise NotImplementedError

    def update_group(self, group_id: int, changes: Mapping[str, Any]) -> Group:
        raise NotImplementedError

    def delete_by_id(self, group_id: int) -> bool:
        raise NotImplementedError
