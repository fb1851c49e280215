"""ViewModel for the lineup planner page.

Sits between the widgets and ``LineupPlanner``: translates drag-and-drop
intents and form submissions into planner calls, reports problems to the
``ErrorSurface`` and announces every mutation on the ``EventBus`` so the
view re-renders from planner state (never from its own copy).

No PyQt dependency; tests drive it directly.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from config import settings
from core.remote_client import RemoteError
from gui.components.card_renderer import (
    RenderedList,
    quarter_entry_capability,
    render_cards,
    roster_entry_capability,
)
from gui.models import TeamEntry
from gui.repositories.protocols import RosterSource, TeamListingSource
from gui.services.error_surface import ErrorSurface
from gui.services.event_bus import EventBus, GUIEvent
from gui.services.form_validation import TemporaryPlayerForm, validate_temporary_player
from gui.services.session_service import User
from planning.lineup_planner import (
    AssignOutcome,
    Availability,
    LineupPlanner,
    Player,
    QUARTER_CAPACITY,
    quarters_for_match_type,
)

__all__ = ["LineupPlannerViewModel"]

_log = logging.getLogger(__name__)

_AVAILABILITY_ORDER = {
    Availability.AVAILABLE: 0,
    Availability.INJURED: 1,
    Availability.UNAVAILABLE: 2,
}

MSG_SELECT_TEAM_FIRST = "Select a team before assigning players."
MSG_SELECT_TEAM_FOR_TEMP = "Select a team to add temporary players."
MSG_INVALID_PLAYER = "Invalid player."
MSG_PLAYER_NOT_CALLED_UP = "This player is not called up."
MSG_QUARTER_FULL = f"This quarter already has {QUARTER_CAPACITY} players."
MSG_INVALID_QUARTER = "That quarter does not exist."
MSG_PLAYERS_LOAD_FAILED = "Could not load players."
MSG_TEAMS_LOAD_FAILED = "Could not load teams."
MSG_GUEST_WITH_TEAM = (
    "Sign in to load a team's players. You can use temporary players without an account."
)


class LineupPlannerViewModel:
    def __init__(
        self,
        planner: LineupPlanner,
        *,
        roster_source: RosterSource | None,
        team_source: TeamListingSource | None,
        bus: EventBus,
        errors: ErrorSurface,
    ) -> None:
        self.planner = planner
        self._roster_source = roster_source
        self._team_source = team_source
        self._bus = bus
        self.errors = errors
        self.form = TemporaryPlayerForm()
        self.teams: List[TeamEntry] = []
        self.enabled = False
        self.match_type = settings.DEFAULT_MATCH_TYPE

    # Notifications ------------------------------------------------------
    def _roster_changed(self) -> None:
        self._bus.publish(GUIEvent.ROSTER_CHANGED)

    def _quarters_changed(self) -> None:
        self._bus.publish(GUIEvent.QUARTERS_CHANGED)

    def _set_enabled(self, enabled: bool) -> None:
        if self.enabled != enabled:
            self.enabled = enabled
            self._bus.publish(GUIEvent.PLANNER_ENABLED_CHANGED, enabled)

    @property
    def team_id(self) -> Optional[str]:
        return self.planner.team_id

    @property
    def shows_team_selector(self) -> bool:
        return self.planner.team_id is None

    # Startup / team selection -------------------------------------------
    def initialize(self, team_id_from_url: str | None, user: User | None) -> None:
        """Pick the starting mode from the URL team id and the signed-in user."""
        if team_id_from_url and user is not None:
            self.select_team(team_id_from_url)
        elif user is None:
            self.planner.set_team(settings.GUEST_TEAM_ID)
            self.planner.set_roster([])
            self._set_enabled(True)
            if team_id_from_url:
                self.errors.show(MSG_GUEST_WITH_TEAM)
            self._bus.publish(GUIEvent.TEAM_SELECTED, settings.GUEST_TEAM_ID)
        else:
            self._load_teams(user)
            self._set_enabled(False)
        self.change_match_type(self.match_type)
        self._roster_changed()

    def _load_teams(self, user: User) -> None:
        if self._team_source is None:
            self.teams = []
        else:
            try:
                self.teams = list(self._team_source.list_user_teams(user.id))
            except RemoteError as e:
                _log.error("Loading teams for %s failed: %s", user.id, e)
                self.errors.show(MSG_TEAMS_LOAD_FAILED)
                self.teams = []
        self._bus.publish(GUIEvent.TEAMS_LOADED, list(self.teams))

    def select_team(self, team_id: str | None) -> None:
        if not team_id:
            self.planner.set_team(None)
            self._set_enabled(False)
            self._bus.publish(GUIEvent.TEAM_SELECTED, None)
            self._roster_changed()
            self._quarters_changed()
            return
        self.planner.set_team(team_id)
        self._set_enabled(True)
        self._bus.publish(GUIEvent.TEAM_SELECTED, team_id)
        self.reload_roster()
        self._quarters_changed()

    def reload_roster(self) -> None:
        team_id = self.planner.team_id
        if not team_id or self._roster_source is None or team_id == settings.GUEST_TEAM_ID:
            self._roster_changed()
            return
        try:
            players = self._roster_source.load_roster(team_id)
        except RemoteError as e:
            _log.error("Loading roster for team %s failed: %s", team_id, e)
            self.errors.show(MSG_PLAYERS_LOAD_FAILED)
        else:
            self.planner.set_roster(players)
        self._roster_changed()

    # Temporary players ----------------------------------------------------
    def update_form(self, field_name: str, value: str) -> None:
        self.form.update(field_name, value)

    def add_temporary_player(self) -> Optional[Player]:
        self.errors.hide()
        if not self.planner.team_id:
            self.errors.show(MSG_SELECT_TEAM_FOR_TEMP)
            return None
        problems = validate_temporary_player(self.form)
        if problems:
            self.errors.show(problems[0])
            return None
        player = self.planner.add_temporary_player(self.form.clean_name, self.form.clean_number)
        _log.debug("Added temporary player %s (%s)", player.id, player.name)
        self.form.clear()
        self._bus.publish(GUIEvent.FORM_RESET)
        self._roster_changed()
        return player

    # Quarters -------------------------------------------------------------
    def change_match_type(self, match_type: str | None) -> None:
        self.match_type = (
            match_type if match_type in settings.MATCH_TYPES else settings.DEFAULT_MATCH_TYPE
        )
        self.set_quarter_count(quarters_for_match_type(self.match_type))

    def set_quarter_count(self, count: int) -> None:
        self.planner.set_quarter_count(count)
        self._quarters_changed()

    def handle_drop(self, quarter_index: int, player_id: str) -> Optional[AssignOutcome]:
        """Drop of a roster entry onto a quarter; returns the planner outcome if attempted."""
        self.errors.hide()
        outcome: Optional[AssignOutcome] = None
        if not self.planner.team_id:
            self.errors.show(MSG_SELECT_TEAM_FIRST)
        elif self.planner.find_player(player_id) is None:
            self.errors.show(MSG_INVALID_PLAYER)
        elif not self.planner.is_player_available(player_id):
            self.errors.show(MSG_PLAYER_NOT_CALLED_UP)
        else:
            outcome = self.planner.assign_to_quarter(quarter_index, player_id)
            if outcome is AssignOutcome.QUARTER_FULL:
                self.errors.show(MSG_QUARTER_FULL)
            elif outcome is AssignOutcome.INVALID_QUARTER:
                _log.error(
                    "Drop targeted quarter %s but only %s exist",
                    quarter_index,
                    self.planner.quarter_count,
                )
                self.errors.show(MSG_INVALID_QUARTER)
        self._quarters_changed()
        return outcome

    def remove_from_quarter(self, quarter_index: int, player_id: str) -> bool:
        removed = self.planner.remove_from_quarter(quarter_index, player_id)
        self._quarters_changed()
        return removed

    def set_player_availability(self, player_id: str, status: str) -> Availability:
        applied = self.planner.set_player_availability(player_id, status)
        if applied is not Availability.AVAILABLE and self.planner.remove_from_all_quarters(
            player_id
        ):
            self._quarters_changed()
        self._roster_changed()
        return applied

    # Read models ----------------------------------------------------------
    def roster_cards(self) -> RenderedList:
        if not self.planner.team_id:
            return RenderedList(empty_message="Select a team to load players.")
        status_of = self.planner.get_player_availability
        players = sorted(
            self.planner.get_sorted_roster(),
            key=lambda p: _AVAILABILITY_ORDER.get(status_of(p.id), 3),
        )
        return render_cards(
            players,
            roster_entry_capability(status_of),
            empty_message="There are no players in this team.",
        )

    def quarter_cards(self, quarter_index: int) -> RenderedList:
        players = []
        for player_id in self.planner.quarter(quarter_index):
            player = self.planner.find_player(player_id)
            if player is not None:  # dangling ids after a roster reload are skipped
                players.append(player)
        return render_cards(players, quarter_entry_capability(), empty_message="Drop players here")

    def candidates_for_quarter(self, quarter_index: int) -> List[Player]:
        """Available players not yet in ``quarter_index`` (for the add menu)."""
        return [
            p
            for p in self.planner.get_sorted_roster()
            if self.planner.is_player_available(p.id)
            and not self.planner.is_player_in_quarter(quarter_index, p.id)
        ]
