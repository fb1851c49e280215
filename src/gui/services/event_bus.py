"""Synchronous publish/subscribe bus for the planner GUI.

The view model publishes after each state mutation and the widgets
subscribe to re-render; neither side holds a reference to the other.

Handler failures are isolated: one failing handler doesn't break the
publish cycle, the exception is kept in ``errors`` for inspection.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Dict, List, Protocol

__all__ = ["GUIEvent", "Event", "EventBus", "EventHandler", "Subscription"]


class GUIEvent(str, Enum):
    TEAM_SELECTED = "team_selected"
    TEAMS_LOADED = "teams_loaded"
    ROSTER_CHANGED = "roster_changed"
    QUARTERS_CHANGED = "quarters_changed"
    PLANNER_ENABLED_CHANGED = "planner_enabled_changed"
    FORM_RESET = "form_reset"
    ERROR_OCCURRED = "error_occurred"
    ERROR_CLEARED = "error_cleared"
    PERMISSIONS_INVALIDATED = "permissions_invalidated"
    LOG_RECORD_ADDED = "log_record_added"


@dataclass
class Event:
    name: str
    payload: Any
    timestamp: float


class EventHandler(Protocol):
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


def _key(name: str | GUIEvent) -> str:
    return name.value if isinstance(name, GUIEvent) else name


class EventBus:
    """Dispatches events to handlers in subscription order.

    Handlers run outside the lock (subscriber list is copied first) so a
    handler may subscribe or unsubscribe while being dispatched.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []

    def subscribe(
        self, name: str | GUIEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_key(name), handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = [s for s in self._subs.get(sub.event, ()) if s is not sub]
            if bucket:
                self._subs[sub.event] = bucket
            else:
                self._subs.pop(sub.event, None)
        sub.active = False

    def publish(self, name: str | GUIEvent, payload: Any = None) -> Event:
        evt = Event(name=_key(name), payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(evt.name, ()))
        for sub in subs:
            if not sub.active:
                continue
            if sub.once:
                self.unsubscribe(sub)
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - handler isolation
                with self._lock:
                    self._errors.append((evt, exc))
        return evt

    def subscriber_count(self, name: str | GUIEvent) -> int:
        with self._lock:
            return len(self._subs.get(_key(name), ()))

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()
