"""TeamDataService

Bridges the remote ``players`` / ``team_staff`` tables to the objects the
lineup planner works with:

 - Team roster source: active players of a team as planner ``Player``
   values (id ``player-<backend id>``, number as text or None)
 - Team listing source: teams the signed-in user is active staff of

Remote failures propagate as ``RemoteError``; the view model decides how
to report them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from core.data_helpers import load_data
from core.remote_client import RemoteStoreClient
from gui.models import TeamEntry
from planning.lineup_planner import Player

__all__ = ["TeamDataService", "planner_player_id"]


def planner_player_id(backend_id: object) -> str:
    return f"player-{backend_id}"


@dataclass
class TeamDataService:
    """Stateless beyond the client reference; cheap to recreate."""

    client: RemoteStoreClient

    def load_roster(self, team_id: str) -> List[Player]:
        if not team_id:
            return []
        query = (
            self.client.table("players")
            .select("id, name, number")
            .eq("team_id", team_id)
            .eq("active", True)
        )
        rows = load_data(query, "Error loading players")
        players: List[Player] = []
        for row in rows:
            number = row.get("number")
            players.append(
                Player(
                    id=planner_player_id(row["id"]),
                    name=row.get("name") or "",
                    number=str(number) if number not in (None, "") else None,
                    is_temporary=False,
                )
            )
        return players

    def list_user_teams(self, user_id: str) -> List[TeamEntry]:
        query = (
            self.client.table("team_staff")
            .select("team_id, teams(id, name)")
            .eq("user_id", user_id)
            .eq("active", True)
        )
        rows = load_data(query, "Error loading teams")
        # Rows whose joined team is missing (deleted / not visible) are skipped
        return [TeamEntry.from_row(row["teams"]) for row in rows if row.get("teams")]
