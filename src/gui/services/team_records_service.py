"""CRUD over team-scoped backend tables.

``TeamTableService`` is a thin wrapper for any table keyed by ``team_id``
(players, events, training sessions, attendance). ``PlayerRecordsService``
adds the player form rules and maps the unique jersey number violation to
a readable message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from core.data_helpers import (
    MutationResult,
    delete_data,
    insert_data,
    load_data,
    update_data,
)
from core.remote_client import RemoteStoreClient
from gui.models import PlayerRecord
from .form_validation import FormState, FormValidator

__all__ = [
    "PLAYERS",
    "EVENTS",
    "TRAININGS",
    "ATTENDANCE",
    "TeamTableService",
    "PlayerSaveResult",
    "PlayerRecordsService",
]

PLAYERS = "players"
EVENTS = "team_events"
TRAININGS = "team_training_sessions"
ATTENDANCE = "attendance"

UNIQUE_VIOLATION = "23505"
UNIQUE_NUMBER_CONSTRAINT = "uniq_player_number_per_team"


@dataclass
class TeamTableService:
    client: RemoteStoreClient
    table: str

    def list_for_team(
        self,
        team_id: str,
        *,
        columns: str = "*",
        order_by: str | None = None,
        ascending: bool = True,
        active_only: bool = False,
    ) -> List[Dict[str, Any]]:
        query = self.client.table(self.table).select(columns).eq("team_id", team_id)
        if active_only:
            query = query.eq("active", True)
        if order_by:
            query = query.order(order_by, ascending=ascending)
        return list(load_data(query, f"Error loading {self.table}"))

    def create(self, values: Mapping[str, Any], success_message: str = "Saved") -> MutationResult:
        return insert_data(self.client, self.table, values, success_message)

    def update(
        self, record_id: Any, values: Mapping[str, Any], success_message: str = "Updated"
    ) -> MutationResult:
        return update_data(self.client, self.table, record_id, values, success_message)

    def delete(self, record_id: Any, success_message: str = "Deleted") -> MutationResult:
        return delete_data(self.client, self.table, record_id, success_message)

    def deactivate(self, record_id: Any) -> MutationResult:
        """Soft delete used by tables carrying an ``active`` flag."""
        return update_data(self.client, self.table, record_id, {"active": False}, "Deactivated")


@dataclass(frozen=True)
class PlayerSaveResult:
    success: bool
    errors: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        return "\n".join(self.errors)


class PlayerRecordsService:
    """Players page data access: active roster ordered by number, save with rules."""

    def __init__(self, client: RemoteStoreClient) -> None:
        self._table = TeamTableService(client, PLAYERS)

    def list_players(self, team_id: str) -> List[PlayerRecord]:
        rows = self._table.list_for_team(team_id, order_by="number", active_only=True)
        return [PlayerRecord.from_row(r) for r in rows]

    @staticmethod
    def build_payload(team_id: str, form: FormState, validator: FormValidator) -> Optional[dict]:
        validator.reset()
        name = form.text("name")
        validator.required(name, "Player name")
        number: Optional[int] = None
        number_text = form.text("number")
        if number_text:
            try:
                number = int(number_text)
            except ValueError:
                number = -1
            if number < 0:
                validator.add_error("The jersey number must be a whole number of 0 or more")
        validator.date(form.text("birthdate") or None, "Birthdate")
        if not validator.is_valid():
            return None
        return {
            "team_id": team_id,
            "name": name,
            "number": number,
            "position": form.text("position") or None,
            "birthdate": form.text("birthdate") or None,
            "notes": form.text("notes") or None,
            "active": True,
        }

    def save(self, team_id: str, form: FormState, *, record_id: str | None = None) -> PlayerSaveResult:
        validator = FormValidator()
        payload = self.build_payload(team_id, form, validator)
        if payload is None:
            return PlayerSaveResult(success=False, errors=tuple(validator.errors))
        if record_id is None:
            result = self._table.create(payload, "Player created")
        else:
            result = self._table.update(record_id, payload, "Player updated")
        if result.success:
            return PlayerSaveResult(success=True)
        return PlayerSaveResult(success=False, errors=(self._describe_failure(result, payload),))

    @staticmethod
    def _describe_failure(result: MutationResult, payload: Mapping[str, Any]) -> str:
        error = result.error
        if error is not None and error.code == UNIQUE_VIOLATION:
            if UNIQUE_NUMBER_CONSTRAINT in (error.message or ""):
                return f"Jersey number {payload['number']} is already used by another player in this team"
            return "A player with these details already exists in this team"
        return error.message if error is not None else "Could not save player"

    def deactivate(self, record_id: str) -> MutationResult:
        return self._table.deactivate(record_id)
