"""Page-level error line.

Holds at most one message; a new error replaces the previous one. The
widget layer listens for ``ERROR_OCCURRED`` / ``ERROR_CLEARED``.
"""

from __future__ import annotations

from typing import Optional

from .event_bus import EventBus, GUIEvent

__all__ = ["ErrorSurface"]


class ErrorSurface:
    def __init__(self, bus: EventBus | None = None) -> None:
        self._bus = bus
        self._message: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        return self._message

    @property
    def visible(self) -> bool:
        return self._message is not None

    def show(self, message: str) -> None:
        self._message = " ".join(message.split())
        if self._bus is not None:
            self._bus.publish(GUIEvent.ERROR_OCCURRED, self._message)

    def hide(self) -> None:
        if self._message is None:
            return
        self._message = None
        if self._bus is not None:
            self._bus.publish(GUIEvent.ERROR_CLEARED)
