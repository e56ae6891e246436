"""Permission checks against the identity provider's admin API."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Mapping, Optional, Protocol, Sequence, Tuple, Union

from .models import (
    ADMIN_ROLE,
    RESOURCE_ACTIONS,
    USER_ROLE,
    PermissionResource,
    Principal,
)

logger = logging.getLogger("permissions")

ResourceLike = Union[PermissionResource, str]


class PermissionAuthority(Protocol):
    """External authority that owns the permission model."""

    async def user_has_permission(
        self,
        *,
        permissions: Mapping[str, Sequence[str]],
        user_id: Optional[str] = None,
        role: Optional[str] = None,
    ) -> bool:
        """Return whether the user (or role) holds every listed action."""


class PrincipalDirectory(Protocol):
    """Looks up principals by their server-trusted user identifier."""

    def get_principal(self, user_id: str) -> Optional[Principal]:
        ...


@dataclass(frozen=True)
class PermissionShorthand:
    """Named ``(resource, actions)`` pair used to gate an admin affordance."""

    name: str
    resource: PermissionResource
    actions: Tuple[str, ...]


PERMISSION_SHORTHANDS: Dict[str, PermissionShorthand] = {
    shorthand.name: shorthand
    for shorthand in (
        PermissionShorthand("manage_users", PermissionResource.USER, ("list", "create", "set-role")),
        PermissionShorthand("ban_users", PermissionResource.USER, ("ban",)),
        PermissionShorthand("impersonate_users", PermissionResource.USER, ("impersonate",)),
        PermissionShorthand("manage_sessions", PermissionResource.SESSION, ("list", "revoke")),
    )
}

DEFAULT_ROLE_GRANTS: Dict[str, Dict[PermissionResource, FrozenSet[str]]] = {
    ADMIN_ROLE: dict(RESOURCE_ACTIONS),
    USER_ROLE: {},
}


def _coerce_resource(resource: ResourceLike) -> PermissionResource:
    try:
        return PermissionResource(resource)
    except ValueError as exc:
        raise ValueError(f"Unknown permission resource: {resource!r}") from exc


class RolePermissionAuthority:
    """In-process authority evaluating a static role table plus explicit grants."""

    def __init__(
        self,
        role_grants: Optional[Mapping[str, Mapping[PermissionResource, FrozenSet[str]]]] = None,
        *,
        directory: Optional[PrincipalDirectory] = None,
    ) -> None:
        self._role_grants = dict(DEFAULT_ROLE_GRANTS if role_grants is None else role_grants)
        self._directory = directory

    def _granted(self, role: str, principal: Optional[Principal]) -> Dict[PermissionResource, FrozenSet[str]]:
        granted: Dict[PermissionResource, FrozenSet[str]] = {
            resource: frozenset(actions) for resource, actions in self._role_grants.get(role, {}).items()
        }
        if principal is not None:
            for resource, actions in principal.grants.items():
                granted[resource] = granted.get(resource, frozenset()) | actions
        return granted

    async def user_has_permission(
        self,
        *,
        permissions: Mapping[str, Sequence[str]],
        user_id: Optional[str] = None,
        role: Optional[str] = None,
    ) -> bool:
        if user_id is None and role is None:
            raise ValueError("Either user_id or role must be provided")

        principal: Optional[Principal] = None
        if user_id is not None:
            if self._directory is None:
                return False
            principal = self._directory.get_principal(user_id)
            if principal is None:
                return False
            role = principal.role

        granted = self._granted(role or "", principal)
        for resource, actions in permissions.items():
            held = granted.get(_coerce_resource(resource), frozenset())
            if not set(actions) <= held:
                return False
        return True


class PermissionResolver:
    """Fail-closed evaluator of permission queries.

    Any error raised by the authority is logged and reported as "not
    permitted"; callers never see an exception from a permission query.
    """

    def __init__(self, authority: PermissionAuthority) -> None:
        self._authority = authority

    async def _query(
        self,
        resource: ResourceLike,
        actions: Sequence[str],
        *,
        user_id: Optional[str] = None,
        role: Optional[str] = None,
    ) -> bool:
        if not actions:
            raise ValueError("at least one action must be requested")
        resource_key = _coerce_resource(resource).value
        try:
            result = await self._authority.user_has_permission(
                permissions={resource_key: list(actions)},
                user_id=user_id,
                role=role,
            )
        except Exception:
            logger.warning(
                "Permission check failed user=%s role=%s resource=%s actions=%s",
                user_id,
                role,
                resource_key,
                list(actions),
                exc_info=True,
            )
            return False
        return result is True

    async def has_permission(
        self,
        principal: Optional[Principal],
        resource: ResourceLike,
        actions: Sequence[str],
    ) -> bool:
        """Return whether ``principal`` holds every action on ``resource``."""

        if principal is None:
            return False
        if principal.user_id is None:
            return await self._query(resource, actions, role=principal.role)
        return await self._query(resource, actions, user_id=principal.user_id)

    async def check_user_permission(self, user_id: str, resource: ResourceLike, action: str) -> bool:
        return await self._query(resource, [action], user_id=user_id)

    async def check_role_permission(self, role: str, resource: ResourceLike, action: str) -> bool:
        return await self._query(resource, [action], role=role)

    async def check(self, principal: Optional[Principal], name: str) -> bool:
        """Evaluate the named entry of :data:`PERMISSION_SHORTHANDS`."""

        try:
            shorthand = PERMISSION_SHORTHANDS[name]
        except KeyError as exc:
            raise KeyError(f"Unknown permission shorthand: {name}") from exc
        return await self.has_permission(principal, shorthand.resource, shorthand.actions)

    async def can_manage_users(self, principal: Optional[Principal]) -> bool:
        return await self.check(principal, "manage_users")

    async def can_ban_users(self, principal: Optional[Principal]) -> bool:
        return await self.check(principal, "ban_users")

    async def can_impersonate_users(self, principal: Optional[Principal]) -> bool:
        return await self.check(principal, "impersonate_users")

    async def can_manage_sessions(self, principal: Optional[Principal]) -> bool:
        return await self.check(principal, "manage_sessions")

    async def permission_summary(self, principal: Optional[Principal]) -> Dict[str, bool]:
        return {name: await self.check(principal, name) for name in PERMISSION_SHORTHANDS}

    async def role_permission_summary(self, role: str) -> Dict[str, bool]:
        """Evaluate every shorthand for a role label, independent of any user.

        A blank label names no role and holds nothing.
        """

        if not role or not role.strip():
            return {name: False for name in PERMISSION_SHORTHANDS}
        return await self.permission_summary(Principal(role=role))


class CallablePrincipalDirectory:
    """Adapts a plain lookup function to :class:`PrincipalDirectory`."""

    def __init__(self, lookup: Callable[[str], Optional[Principal]]) -> None:
        self._lookup = lookup

    def get_principal(self, user_id: str) -> Optional[Principal]:
        return self._lookup(user_id)
