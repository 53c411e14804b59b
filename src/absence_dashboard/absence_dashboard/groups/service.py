from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from ..access.actor import Actor, require_actor
from ..access.policy import AccessPolicy
from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Group
from .repository import GroupRepository

logger = logging.getLogger(__name__)

GROUP_FIELDS = frozenset({"name", "description", "company_id", "phone", "active"})


class GroupService:
    """Use case: manage organizational groups (HR only for changes)."""

    def __init__(self, groups: GroupRepository, policy: AccessPolicy):
        self._groups = groups
        self._policy = policy

    def _require_manage(self, actor: Actor, action: str) -> None:
        if not self._policy.can_manage_group(actor):
            logger.info("denied: actor=%s action=%s on groups", actor.actor_id, action)
            raise AuthorizationError("Only HR can manage groups")

    def _load(self, group_id: int) -> Group:
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise ValidationError("Group not found")
        return group

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> dict:
        unknown = set(data) - GROUP_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        clean = dict(data)
        if "name" in clean:
            clean["name"] = require_non_empty(clean["name"], "Group name")
        return clean

    def list_visible(self, actor: Optional[Actor]) -> List[Group]:
        actor = require_actor(actor)
        return [g for g in self._groups.list_groups() if self._policy.can_view_entity(actor, g)]

    def get(self, actor: Optional[Actor], group_id: int) -> Group:
        actor = require_actor(actor)
        group = self._load(group_id)
        if not self._policy.can_view_entity(actor, group):
            raise AuthorizationError("You are not allowed to view this group")
        return group

    def create(self, actor: Optional[Actor], data: Mapping[str, Any]) -> Group:
        actor = require_actor(actor)
        self._require_manage(actor, "create")
        clean = self._clean(data)
        if "name" not in clean:
            raise ValidationError("Group name is invalid")
        group = self._groups.create_group(clean)
        logger.info("group %s created by %s", group.group_id, actor.actor_id)
        return group

    def update(self, actor: Optional[Actor], group_id: int, changes: Mapping[str, Any]) -> Group:
        actor = require_actor(actor)
        self._require_manage(actor, "update")
        group = self._load(group_id)
        clean = self._clean(changes)
        if not clean:
            raise ValidationError("Nothing to update")
        return self._groups.update_group(group.group_id, clean)

    def set_active(self, actor: Optional[Actor], group_id: int, active: bool) -> Group:
        return self.update(actor, group_id, {"active": bool(active)})

    def delete(self, actor: Optional[Actor], group_id: int) -> None:
        actor = require_actor(actor)
        self._require_manage(actor, "delete")
        group = self._load(group_id)
        if not self._groups.delete_by_id(group.group_id):
            raise ValidationError("Failed to delete group")
        logger.info("group %s deleted by %s", group.group_id, actor.actor_id)
