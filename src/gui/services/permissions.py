"""Permission Service

Passthrough checks against the staff membership stored in the backend.
Policy lives server-side; this module only reads the caller's role and
permission flags for a team and answers yes/no questions about them.

One ``team_staff`` lookup (with nested ``team_staff_permissions``) per
team and user, cached in an explicit ``PermissionCache``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional

from core.remote_client import RemoteError, RemoteStoreClient
from .event_bus import EventBus, GUIEvent
from .permission_cache import PermissionCache
from .session_service import SessionService

__all__ = [
    "StaffMembership",
    "PermissionService",
    "ALL_PERMISSIONS",
    "AVAILABLE_ROLES",
    "permission_label",
    "role_label",
]

_log = logging.getLogger(__name__)

ALL_PERMISSIONS = [
    "MANAGE_TEAM",
    "MANAGE_STAFF",
    "MANAGE_STAFF_PERMISSIONS",
    "MANAGE_PLAYERS",
    "MANAGE_EVENTS",
    "MANAGE_TRAININGS",
    "MANAGE_ATTENDANCE",
]

AVAILABLE_ROLES = [
    "HEAD_COACH",
    "SECOND_COACH",
    "ASSISTANT_COACH",
    "PHYSICAL_TRAINER",
    "GOALKEEPER_COACH",
    "ANALYST",
    "MEDICAL_STAFF",
    "OTHER",
]

_PERMISSION_LABELS = {
    "MANAGE_TEAM": "Manage team",
    "MANAGE_STAFF": "Manage coaches",
    "MANAGE_STAFF_PERMISSIONS": "Manage permissions",
    "MANAGE_PLAYERS": "Manage players",
    "MANAGE_EVENTS": "Manage events",
    "MANAGE_TRAININGS": "Manage trainings",
    "MANAGE_ATTENDANCE": "Manage attendance",
}

_ROLE_LABELS = {
    "HEAD_COACH": "Head coach",
    "SECOND_COACH": "Second coach",
    "ASSISTANT_COACH": "Assistant coach",
    "PHYSICAL_TRAINER": "Physical trainer",
    "GOALKEEPER_COACH": "Goalkeeper coach",
    "ANALYST": "Analyst",
    "MEDICAL_STAFF": "Medical staff",
    "OTHER": "Other",
}

STAFF_SELECT = "id, role, active, team_staff_permissions(permission, value)"


def permission_label(permission: str) -> str:
    return _PERMISSION_LABELS.get(permission, permission)


def role_label(role: str | None) -> str:
    if role is None:
        return ""
    return _ROLE_LABELS.get(role, role)


@dataclass(frozen=True)
class StaffMembership:
    """A user's active staff row for one team.

    Attributes:
        id: Backend id of the ``team_staff`` row.
        role: Role key (e.g. "HEAD_COACH").
        active: Whether the membership is active.
        permissions: Permission key -> granted flag.
    """

    id: str
    role: Optional[str]
    active: bool = True
    permissions: Dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "StaffMembership":
        perms: Dict[str, bool] = {}
        for entry in row.get("team_staff_permissions") or []:
            perms[entry["permission"]] = entry.get("value") is True
        return cls(
            id=str(row["id"]),
            role=row.get("role"),
            active=bool(row.get("active", True)),
            permissions=perms,
        )

    def grants(self, permission: str) -> bool:
        return self.permissions.get(permission) is True


class PermissionService:
    """Answers permission questions for the signed-in user.

    Failed lookups are logged and treated as "no permissions"; they are not
    cached so a later call retries the backend.
    """

    def __init__(
        self,
        client: RemoteStoreClient,
        session: SessionService,
        cache: PermissionCache[StaffMembership] | None = None,
        *,
        bus: EventBus | None = None,
    ) -> None:
        self._client = client
        self._session = session
        self.cache: PermissionCache[StaffMembership] = cache or PermissionCache()
        self._bus = bus

    def get_staff_data(self, team_id: str) -> Optional[StaffMembership]:
        try:
            user = self._session.current_user()
        except RemoteError as e:
            _log.error("Could not resolve current user: %s", e)
            return None
        if user is None:
            return None
        cached = self.cache.get(team_id, user.id)
        if cached is not None:
            return cached
        query = (
            self._client.table("team_staff")
            .select(STAFF_SELECT)
            .eq("team_id", team_id)
            .eq("user_id", user.id)
            .eq("active", True)
            .single()
        )
        try:
            row = query.execute().data
        except RemoteError as e:
            _log.error("Error fetching staff data for team %s: %s", team_id, e)
            return None
        if not row:
            return None
        membership = StaffMembership.from_row(row)
        self.cache.put(team_id, user.id, membership)
        return membership

    def has_permission(self, team_id: str, permission: str) -> bool:
        staff = self.get_staff_data(team_id)
        return staff is not None and staff.grants(permission)

    def has_any_permission(self, team_id: str, permissions: Iterable[str]) -> bool:
        staff = self.get_staff_data(team_id)
        return staff is not None and any(staff.grants(p) for p in permissions)

    def has_all_permissions(self, team_id: str, permissions: Iterable[str]) -> bool:
        staff = self.get_staff_data(team_id)
        return staff is not None and all(staff.grants(p) for p in permissions)

    def get_user_role(self, team_id: str) -> Optional[str]:
        staff = self.get_staff_data(team_id)
        return staff.role if staff else None

    def get_all_permissions(self, team_id: str) -> Dict[str, bool]:
        staff = self.get_staff_data(team_id)
        return dict(staff.permissions) if staff else {}

    # Invalidation ---------------------------------------------------------
    def invalidate_team(self, team_id: str) -> None:
        self.cache.invalidate_team(team_id)
        if self._bus is not None:
            self._bus.publish(GUIEvent.PERMISSIONS_INVALIDATED, team_id)

    def clear_cache(self) -> None:
        self.cache.clear()
        if self._bus is not None:
            self._bus.publish(GUIEvent.PERMISSIONS_INVALIDATED, None)
