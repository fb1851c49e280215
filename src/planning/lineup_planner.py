"""In-memory lineup planning state.

Holds the roster available for a match (persisted players loaded from the
remote store plus session-only temporary players) and one Assignment Set
per quarter. Each set is a capacity-bound collection of player ids:

    quarters = [
        ["player-12", "temp-1", ...],   # quarter 1, at most QUARTER_CAPACITY ids
        [...],                          # quarter 2
    ]

Nothing here performs I/O; the host loads the roster and re-renders after
every mutation. Expected conditions (full quarter, duplicate, bad index)
are reported through ``AssignOutcome`` rather than raised.
"""

from __future__ import annotations

import itertools
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from config import settings

__all__ = [
    "Player",
    "AssignOutcome",
    "Availability",
    "LineupPlanner",
    "QUARTER_CAPACITY",
    "sort_players_by_number",
    "quarters_for_match_type",
]

QUARTER_CAPACITY = settings.QUARTER_CAPACITY

# Shared across planner instances so temporary ids never repeat within a process.
_temp_ids = itertools.count(1)
# Signs are not parsed: "-5" sorts with the unnumbered players. Jersey input
# only accepts digits, so a signed number never reaches the roster normally.
_LEADING_DIGITS = re.compile(r"\s*(\d+)")


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    number: Optional[str] = None
    is_temporary: bool = False


class AssignOutcome(str, Enum):
    SUCCESS = "success"
    INVALID_QUARTER = "invalid-quarter"
    ALREADY_ASSIGNED = "already-assigned"
    QUARTER_FULL = "quarter-full"


class Availability(str, Enum):
    AVAILABLE = "available"
    INJURED = "injured"
    UNAVAILABLE = "unavailable"

    @classmethod
    def coerce(cls, value: str | Availability | None) -> Availability:
        try:
            return cls(value)
        except ValueError:
            return cls.AVAILABLE


def _jersey_value(number: Optional[str]) -> float:
    if not number:
        return math.inf
    match = _LEADING_DIGITS.match(str(number))
    if match is None:
        return math.inf
    return int(match.group(1))


def _roster_sort_key(player: Player) -> Tuple[float, int]:
    # Equal numeric values: the longer printed number ("07" before "7") goes first.
    printed = len(str(player.number)) if player.number else 0
    return (_jersey_value(player.number), -printed)


def sort_players_by_number(players: Iterable[Player]) -> List[Player]:
    """Return players ordered for display: jersey number ascending, no number last."""
    return sorted(players, key=_roster_sort_key)


def quarters_for_match_type(match_type: str | None) -> int:
    count = settings.MATCH_TYPES.get(match_type or "")
    if count is None:
        count = settings.MATCH_TYPES[settings.DEFAULT_MATCH_TYPE]
    return count


class LineupPlanner:
    """Owns the roster and the per-quarter Assignment Sets for one team."""

    def __init__(self, quarter_count: int = settings.DEFAULT_QUARTER_COUNT) -> None:
        self.team_id: Optional[str] = None
        self._players: List[Player] = []
        self._temp_players: List[Player] = []
        self._availability: Dict[str, Availability] = {}
        self._quarter_count = max(1, quarter_count)
        self._quarters: List[List[str]] = self._empty_quarters(self._quarter_count)

    @staticmethod
    def _empty_quarters(count: int) -> List[List[str]]:
        return [[] for _ in range(count)]

    # Team / roster ------------------------------------------------------
    def set_team(self, team_id: Optional[str]) -> None:
        """Switch team context; temporary players and all assignments are dropped.

        The persisted roster is left alone, the caller reloads it afterwards.
        """
        self.team_id = team_id
        for player in self._temp_players:
            self._availability.pop(player.id, None)
        self._temp_players = []
        self._quarters = self._empty_quarters(self._quarter_count)

    def set_roster(self, players: Iterable[Player]) -> None:
        self._players = list(players)
        for player in self._players:
            self._availability.setdefault(player.id, Availability.AVAILABLE)

    def add_temporary_player(self, name: str, number: Optional[str] = None) -> Player:
        """Append a session-only player. Input is expected to be validated already."""
        taken = {p.id for p in self.get_roster()}
        player_id = f"temp-{next(_temp_ids)}"
        while player_id in taken:
            player_id = f"temp-{next(_temp_ids)}"
        player = Player(id=player_id, name=name, number=number or None, is_temporary=True)
        self._temp_players.append(player)
        self._availability[player.id] = Availability.AVAILABLE
        return player

    def get_roster(self) -> List[Player]:
        return [*self._players, *self._temp_players]

    def get_sorted_roster(self) -> List[Player]:
        return sort_players_by_number(self.get_roster())

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.get_roster():
            if player.id == player_id:
                return player
        return None

    @property
    def temporary_players(self) -> List[Player]:
        return list(self._temp_players)

    # Availability ---------------------------------------------------------
    def set_player_availability(self, player_id: str, status: str | Availability) -> Availability:
        safe = Availability.coerce(status)
        self._availability[player_id] = safe
        return safe

    def get_player_availability(self, player_id: str) -> Availability:
        return self._availability.get(player_id, Availability.AVAILABLE)

    def is_player_available(self, player_id: str) -> bool:
        return self.get_player_availability(player_id) is Availability.AVAILABLE

    # Quarters -------------------------------------------------------------
    @property
    def quarter_count(self) -> int:
        return self._quarter_count

    @property
    def quarters(self) -> List[Tuple[str, ...]]:
        return [tuple(q) for q in self._quarters]

    def quarter(self, quarter_index: int) -> Tuple[str, ...]:
        if not self._valid_index(quarter_index):
            return ()
        return tuple(self._quarters[quarter_index])

    def set_quarter_count(self, count: int | None) -> None:
        safe = max(1, count or 1)
        if safe == self._quarter_count:
            return
        if safe > len(self._quarters):
            self._quarters.extend(self._empty_quarters(safe - len(self._quarters)))
        else:
            del self._quarters[safe:]
        self._quarter_count = safe

    def _valid_index(self, quarter_index: int) -> bool:
        return 0 <= quarter_index < len(self._quarters)

    def is_player_in_quarter(self, quarter_index: int, player_id: str) -> bool:
        if not self._valid_index(quarter_index):
            return False
        return player_id in self._quarters[quarter_index]

    def is_quarter_full(self, quarter_index: int) -> bool:
        if not self._valid_index(quarter_index):
            return False
        return len(self._quarters[quarter_index]) >= QUARTER_CAPACITY

    def assign_to_quarter(self, quarter_index: int, player_id: str) -> AssignOutcome:
        if not self._valid_index(quarter_index):
            return AssignOutcome.INVALID_QUARTER
        assigned = self._quarters[quarter_index]
        if player_id in assigned:
            return AssignOutcome.ALREADY_ASSIGNED
        if len(assigned) >= QUARTER_CAPACITY:
            return AssignOutcome.QUARTER_FULL
        assigned.append(player_id)
        return AssignOutcome.SUCCESS

    def remove_from_quarter(self, quarter_index: int, player_id: str) -> bool:
        if not self._valid_index(quarter_index):
            return False
        assigned = self._quarters[quarter_index]
        if player_id not in assigned:
            return False
        assigned.remove(player_id)
        return True

    def remove_from_all_quarters(self, player_id: str) -> bool:
        removed = False
        for assigned in self._quarters:
            if player_id in assigned:
                assigned.remove(player_id)
                removed = True
        return removed
