"""Service layer exports.

Responsibilities:
 - EventBus publish/subscribe core
 - Page-level error line (`ErrorSurface`)
 - Session, permission and team data access over the remote store
"""

from .event_bus import EventBus, GUIEvent  # noqa: F401
from .error_surface import ErrorSurface  # noqa: F401
from .permission_cache import PermissionCache  # noqa: F401
from .permissions import PermissionService  # noqa: F401
from .session_service import SessionService  # noqa: F401
from .team_data_service import TeamDataService  # noqa: F401

__all__ = [
    "EventBus",
    "GUIEvent",
    "ErrorSurface",
    "PermissionCache",
    "PermissionService",
    "SessionService",
    "TeamDataService",
]
