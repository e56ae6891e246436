"""Principal and permission vocabulary shared with the identity provider."""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PermissionResource(str, Enum):
    """Resources guarded by the admin permission model."""

    USER = "user"
    SESSION = "session"


USER_ACTIONS: Tuple[str, ...] = (
    "create",
    "list",
    "get",
    "update",
    "set-role",
    "ban",
    "impersonate",
    "delete",
    "set-password",
)
SESSION_ACTIONS: Tuple[str, ...] = ("list", "revoke", "delete")

RESOURCE_ACTIONS: Dict[PermissionResource, FrozenSet[str]] = {
    PermissionResource.USER: frozenset(USER_ACTIONS),
    PermissionResource.SESSION: frozenset(SESSION_ACTIONS),
}

ADMIN_ROLE = "admin"
USER_ROLE = "user"


class Principal(BaseModel):
    """Identity of the caller as reported by the session provider."""

    user_id: Optional[str] = None
    role: str = USER_ROLE
    email: Optional[str] = None
    grants: Mapping[PermissionResource, FrozenSet[str]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("role")
    @classmethod
    def _normalize_role(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError("role must not be empty")
        return normalized

    @field_validator("grants")
    @classmethod
    def _freeze_grants(
        cls, value: Mapping[PermissionResource, FrozenSet[str]]
    ) -> Dict[PermissionResource, FrozenSet[str]]:
        return {PermissionResource(resource): frozenset(actions) for resource, actions in value.items()}

    def is_role(self, role: str) -> bool:
        return self.role == role.strip().lower()

    def explicit_actions(self, resource: PermissionResource) -> FrozenSet[str]:
        return self.grants.get(resource, frozenset())
