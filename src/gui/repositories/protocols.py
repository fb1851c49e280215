"""Data source interfaces consumed by the planner view model.

The view model depends on these `Protocol`s rather than on the remote
client so tests can feed in-memory doubles. ``TeamDataService`` satisfies
both.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from gui.models import TeamEntry
from planning.lineup_planner import Player

__all__ = ["RosterSource", "TeamListingSource"]


@runtime_checkable
class RosterSource(Protocol):
    """Persisted players for a team, each with at least id, name and number."""

    def load_roster(self, team_id: str) -> Sequence[Player]: ...  # pragma: no cover - protocol


@runtime_checkable
class TeamListingSource(Protocol):
    """Teams the user is affiliated with (used when no team is pre-selected)."""

    def list_user_teams(self, user_id: str) -> Sequence[TeamEntry]: ...  # pragma: no cover
