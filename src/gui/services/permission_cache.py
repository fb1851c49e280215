"""PermissionCache

Size-bound LRU of staff memberships keyed by ``(team_id, user_id)``.
Owned by ``PermissionService`` (one instance per application context) so
that no module-level state survives between sessions.

Invalidation is manual: the host calls ``invalidate_team`` after editing a
team's staff/permissions and ``clear`` on sign-out or user switch.

Not thread-safe; access is expected from the GUI thread.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

__all__ = ["PermissionCache"]

V = TypeVar("V")
CacheKey = Tuple[str, str]


@dataclass
class PermissionCache(Generic[V]):
    """LRU mapping ``(team_id, user_id) -> value``.

    Parameters
    ----------
    capacity : int
        Maximum number of memberships retained; the least recently used
        entry is evicted beyond it.
    """

    capacity: int = 64

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            self.capacity = 1
        self._store: "OrderedDict[CacheKey, V]" = OrderedDict()

    def get(self, team_id: str, user_id: str) -> Optional[V]:
        key = (str(team_id), str(user_id))
        value = self._store.get(key)
        if value is not None:
            self._store.move_to_end(key, last=True)
        return value

    def put(self, team_id: str, user_id: str, value: V) -> None:
        key = (str(team_id), str(user_id))
        self._store[key] = value
        self._store.move_to_end(key, last=True)
        if len(self._store) > self.capacity:
            self._store.popitem(last=False)

    def invalidate_team(self, team_id: str) -> None:
        """Drop every cached membership for ``team_id`` (all users)."""
        for key in [k for k in self._store if k[0] == str(team_id)]:
            del self._store[key]

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store
