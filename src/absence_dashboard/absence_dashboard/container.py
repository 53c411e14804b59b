from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .access.policy import AccessPolicy
from .api.client import ApiClient, ApiConfig
from .core.constants import DEFAULT_API_TIMEOUT_SECONDS
from .events.api_event_repository import ApiEventRepository
from .events.service import EventService
from .groups.api_group_repository import ApiGroupRepository
from .groups.service import GroupService
from .reference.api_reference_repository import ApiReferenceRepository
from .reference.service import ReferenceService
from .users.api_user_repository import ApiUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class ServiceScope:
    """Services bound to one caller's API token."""

    event_service: EventService
    user_service: UserService
    group_service: GroupService
    reference_service: ReferenceService


def build_scope(client: ApiClient, policy: AccessPolicy) -> ServiceScope:
    users_repo = ApiUserRepository(client)
    groups_repo = ApiGroupRepository(client)
    events_repo = ApiEventRepository(client, users_repo)
    reference_repo = ApiReferenceRepository(client)

    return ServiceScope(
        event_service=EventService(events_repo, users_repo, policy),
        user_service=UserService(users_repo, groups_repo, policy),
        group_service=GroupService(groups_repo, policy),
        reference_service=ReferenceService(reference_repo, policy),
    )


@dataclass(frozen=True)
class Container:
    api: ApiClient
    policy: AccessPolicy
    auth_service: AuthService

    def scoped(self, access_token: Optional[str]) -> ServiceScope:
        return build_scope(self.api.with_token(access_token), self.policy)


def build_container(*, api_config: dict) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout=float(api_config.get("timeout", DEFAULT_API_TIMEOUT_SECONDS)),
    )
    api = ApiClient(config)
    policy = AccessPolicy()

    return Container(
        api=api,
        policy=policy,
        auth_service=AuthService(api),
    )
