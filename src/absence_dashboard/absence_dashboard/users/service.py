from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from ..access.actor import Actor, require_actor
from ..access.policy import USER_FIELDS, AccessPolicy
from ..api.client import ApiClient
from ..common.validators import require_min_length, require_non_empty, require_positive_id
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import ApiError, AuthenticationError, AuthorizationError, ValidationError
from ..groups.model import Group
from ..groups.repository import GroupRepository
from .api_user_repository import user_from_wire
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Optional[Role]
    is_manager: bool
    group_id: Optional[int]
    group_name: Optional[str]
    access_token: str


class AuthService:
    """Use case: authenticate against the remote API (login/logout)."""

    def __init__(self, client: ApiClient):
        self._client = client

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip()
        if not email or not password:
            raise AuthenticationError("Invalid email or password")

        try:
            data = self._client.post("/api/auth/login", {"email": email, "senha": password})
        except ApiError as e:
            if e.status_code in (400, 401, 403, 404):
                raise AuthenticationError("Invalid email or password") from e
            raise

        if not isinstance(data, dict) or not data.get("access_token") or not isinstance(data.get("usuario"), dict):
            raise AuthenticationError("Invalid email or password")

        user = user_from_wire(data["usuario"])
        if not user.active:
            raise AuthenticationError("Invalid email or password")

        logger.info("login: user=%s role=%s", user.cpf, user.role.value if user.role else None)
        return SessionUser(
            user_id=user.cpf,
            full_name=user.name,
            role=user.role,
            is_manager=user.is_manager,
            group_id=user.group_id,
            group_name=user.group_name,
            access_token=str(data["access_token"]),
        )

    def logout(self, access_token: Optional[str]) -> None:
        if not access_token:
            return
        try:
            self._client.with_token(access_token).post("/api/auth/logout")
        except ApiError as e:
            # The local session is cleared regardless.
            logger.warning("remote logout failed: %s", e)


class UserService:
    """Use case: manage user records (HR and group managers)."""

    def __init__(self, users: UserRepository, groups: GroupRepository, policy: AccessPolicy):
        self._users = users
        self._groups = groups
        self._policy = policy

    def _load(self, cpf: int) -> User:
        user = self._users.get_by_cpf(int(cpf))
        if not user:
            raise ValidationError("User not found")
        return user

    def _deny(self, actor: Actor, action: str, cpf) -> None:
        logger.info("denied: actor=%s action=%s user=%s", actor.actor_id, action, cpf)
        raise AuthorizationError("You are not allowed to perform this action")

    def list_visible(self, actor: Optional[Actor]) -> List[User]:
        actor = require_actor(actor)
        if actor.is_staff_admin:
            rows = self._users.list_users()
        elif actor.has_group_authority and actor.group_id is not None:
            rows = self._users.list_users(group_id=actor.group_id)
        else:
            me = self._users.get_by_cpf(actor.actor_id)
            rows = [me] if me else []
        return [u for u in rows if self._policy.can_view_entity(actor, u)]

    def get(self, actor: Optional[Actor], cpf: int) -> User:
        actor = require_actor(actor)
        user = self._load(cpf)
        if not self._policy.can_view_entity(actor, user):
            self._deny(actor, "view", cpf)
        return user

    def selectable_groups(self, actor: Optional[Actor]) -> List[Group]:
        actor = require_actor(actor)
        return self._policy.selectable_groups(actor, self._groups.list_groups(active_only=True))

    def create_account(
        self,
        actor: Optional[Actor],
        *,
        cpf: int,
        name: str,
        email: str,
        password: str,
        group_id: int,
        role: Role = Role.REGULAR,
        is_manager: bool = False,
        uf: Optional[str] = None,
        started_at: Optional[date] = None,
    ) -> User:
        actor = require_actor(actor)
        cpf = require_positive_id(cpf, "CPF")
        group_id = require_positive_id(group_id, "Group")
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if not self._policy.can_create_user_for(actor, group_id):
            self._deny(actor, "create", cpf)
        # Combined contract: the group must also be one the actor may pick.
        if group_id not in {g.group_id for g in self.selectable_groups(actor)}:
            self._deny(actor, "create_in_group", cpf)
        if role != Role.REGULAR and not actor.is_staff_admin:
            self._deny(actor, "create_with_role", cpf)

        if self._users.get_by_cpf(cpf):
            raise ValidationError("A user with this CPF already exists")

        user = User(
            cpf=cpf,
            name=name,
            email=email,
            role=role,
            group_id=group_id,
            is_manager=bool(is_manager),
            active=True,
            uf=uf,
            started_at=started_at,
        )
        created = self._users.create_user(user=user, password=password)
        logger.info("user %s created by %s", created.cpf, actor.actor_id)
        return created

    def update(self, actor: Optional[Actor], cpf: int, changes: Mapping[str, Any]) -> User:
        actor = require_actor(actor)
        target = self._load(cpf)
        if not changes:
            raise ValidationError("Nothing to update")
        unknown = set(changes) - USER_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        if not self._policy.can_manage_user(actor, target, changes.keys()):
            self._deny(actor, "update", cpf)

        clean: Dict[str, Any] = dict(changes)
        if "name" in clean:
            clean["name"] = require_non_empty(clean["name"], "Name")
        if "email" in clean:
            clean["email"] = require_non_empty(clean["email"], "Email")
        if "password" in clean:
            require_min_length(clean["password"], "Password", MIN_PASSWORD_LENGTH)
        if "role" in clean:
            role = Role.parse(clean["role"])
            if role is None:
                raise ValidationError("Invalid role")
            clean["role"] = role
        if "group_id" in clean:
            clean["group_id"] = require_positive_id(clean["group_id"], "Group")
        # TODO: refuse to demote or deactivate the last active staff_admin once product confirms the rule.
        return self._users.update_user(target.cpf, clean)

    def set_active(self, actor: Optional[Actor], cpf: int, active: bool) -> User:
        actor = require_actor(actor)
        target = self._load(cpf)
        if not self._policy.can_set_user_active(actor, target):
            self._deny(actor, "set_active", cpf)
        return self._users.update_user(target.cpf, {"active": bool(active)})

    def delete_user(self, actor: Optional[Actor], cpf: int) -> None:
        actor = require_actor(actor)
        target = self._load(cpf)
        if not self._policy.can_delete_user(actor, target):
            self._deny(actor, "delete", cpf)
        if not self._users.delete_by_cpf(target.cpf):
            raise ValidationError("Failed to delete user")
        logger.info("user %s deleted by %s", target.cpf, actor.actor_id)
