"""Lineup planner GUI public API.

Small surface for external callers (launcher, CLI, tests) so they do not
depend on deep module paths. Importing this package never creates a
QApplication; PyQt6 is only imported by the view modules and by the
bootstrap when a non-headless context is requested.
"""

from __future__ import annotations

from .services.event_bus import (  # noqa: F401
    EventBus,
    GUIEvent,
    Event,
)
from .app.bootstrap import AppContext, create_application  # noqa: F401

__all__ = [
    "EventBus",
    "GUIEvent",
    "Event",
    "AppContext",
    "create_application",
]
