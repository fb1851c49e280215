import pytest

pytest.importorskip("PyQt6")

from PyQt6.QtCore import QMimeData  # noqa: E402
from PyQt6.QtWidgets import QComboBox, QMenu  # noqa: E402

from gui.models import TeamEntry  # noqa: E402
from gui.services.error_surface import ErrorSurface  # noqa: E402
from gui.services.event_bus import EventBus  # noqa: E402
from gui.services.session_service import User  # noqa: E402
from gui.viewmodels.lineup_planner_viewmodel import LineupPlannerViewModel  # noqa: E402
from gui.views.lineup_planner_view import _ID_ROLE, PLAYER_MIME, LineupPlannerView  # noqa: E402
from planning.lineup_planner import Availability, LineupPlanner, Player  # noqa: E402


class _Source:
    def load_roster(self, team_id):
        return [Player(id=f"player-{i}", name=f"P{i}", number=str(i)) for i in range(1, 7)]

    def list_user_teams(self, user_id):
        return [TeamEntry("t1", "U12"), TeamEntry("t2", "U14")]


@pytest.fixture
def view(qtbot):
    bus = EventBus()
    source = _Source()
    vm = LineupPlannerViewModel(
        LineupPlanner(), roster_source=source, team_source=source, bus=bus, errors=ErrorSurface(bus)
    )
    w = LineupPlannerView(vm, bus)
    qtbot.addWidget(w)
    yield w
    w.close_subscriptions()


def _ids(list_widget):
    return [
        list_widget.item(i).data(_ID_ROLE)
        for i in range(list_widget.count())
        if list_widget.item(i).data(_ID_ROLE)
    ]


def test_team_selection_enables_planner(view):
    view.viewmodel.initialize(None, User(id="u1"))
    assert view.team_combo.count() == 3
    assert not view.roster_list.isEnabled()
    view.team_combo.setCurrentIndex(1)
    assert view.viewmodel.team_id == "t1"
    assert view.roster_list.isEnabled()
    assert _ids(view.roster_list)[:2] == ["player-1", "player-2"]
    assert len(view.quarter_zones) == 4
    assert view.team_combo.isHidden()


def test_drop_renders_quarter_from_state(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    zone = view.quarter_zones[0]
    zone.accept_player("player-1")
    zone.accept_player("player-1")
    assert _ids(zone) == ["player-1"]
    for i in range(2, 7):
        zone.accept_player(f"player-{i}")
    assert len(_ids(zone)) == 5
    assert not view.error_label.isHidden()
    assert "5 players" in view.error_label.text()


def test_roster_mime_data_carries_player_id(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    item = view.roster_list.item(0)
    data = view.roster_list.mimeData([item])
    assert isinstance(data, QMimeData)
    assert data.text() == "player-1"
    assert view.roster_list.mimeTypes() == [PLAYER_MIME]


def test_match_type_changes_quarter_zones(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    view.match_type_combo.setCurrentIndex(view.match_type_combo.findData("minibasket"))
    assert len(view.quarter_zones) == 6
    view.match_type_combo.setCurrentIndex(view.match_type_combo.findData("basket"))
    assert len(view.quarter_zones) == 4


def test_temporary_player_form_flow(view):
    view.viewmodel.initialize(None, None)
    view.temp_name_edit.setText("Ana")
    view.temp_number_edit.setText("77")
    view.add_temp_button.click()
    assert view.temp_name_edit.text() == ""
    assert len(view.viewmodel.planner.temporary_players) == 1
    assert len(_ids(view.roster_list)) == 1
    assert view.error_label.isHidden()


def test_team_selector_visibility_follows_mode(view):
    view.viewmodel.initialize(None, User(id="u1"))
    assert not view.team_combo.isHidden()
    view.viewmodel.initialize("t2", User(id="u1"))
    assert view.team_combo.isHidden()


def _status_selector(view, player_id):
    for i in range(view.roster_list.count()):
        item = view.roster_list.item(i)
        if item.data(_ID_ROLE) == player_id:
            return view.roster_list.itemWidget(item).findChild(QComboBox, "plannerStatusSelector")
    return None


def test_status_selector_marks_player_injured(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    view.quarter_zones[0].accept_player("player-1")
    view.quarter_zones[2].accept_player("player-1")
    selector = _status_selector(view, "player-1")
    assert selector.currentData() == "available"
    assert selector.count() == len(Availability)

    selector.setCurrentIndex(selector.findData("injured"))

    planner = view.viewmodel.planner
    assert planner.get_player_availability("player-1") is Availability.INJURED
    assert _ids(view.quarter_zones[0]) == []
    assert _ids(view.quarter_zones[2]) == []
    assert _ids(view.roster_list)[-1] == "player-1"
    assert _status_selector(view, "player-1").currentData() == "injured"


def test_status_selector_back_to_available(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    view.viewmodel.set_player_availability("player-3", "unavailable")
    selector = _status_selector(view, "player-3")
    assert selector.currentText() == "Not called up"
    selector.setCurrentIndex(selector.findData("available"))
    assert view.viewmodel.planner.is_player_available("player-3")


def test_double_click_removes_player_from_quarter(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    zone = view.quarter_zones[1]
    zone.accept_player("player-2")
    zone.accept_player("player-4")
    zone.itemDoubleClicked.emit(zone.item(0))
    assert _ids(zone) == ["player-4"]
    assert not view.viewmodel.planner.is_player_in_quarter(1, "player-2")


def test_context_menu_remove_action(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    zone = view.quarter_zones[0]
    zone.accept_player("player-5")
    menu = zone.context_menu_for(zone.item(0))
    remove = [a for a in menu.actions() if a.text() == "Remove from quarter"]
    assert len(remove) == 1
    remove[0].trigger()
    assert _ids(zone) == []


def test_context_menu_add_player_lists_candidates(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    view.viewmodel.set_player_availability("player-6", "injured")
    zone = view.quarter_zones[3]
    zone.accept_player("player-1")
    menu = zone.context_menu_for(None)
    assert [a.text() for a in menu.actions() if a.text() == "Remove from quarter"] == []
    add_menu = menu.findChild(QMenu, "plannerAddPlayerMenu")
    labels = [a.text() for a in add_menu.actions()]
    assert labels == ["2 P2", "3 P3", "4 P4", "5 P5"]
    add_menu.actions()[1].trigger()
    assert _ids(zone) == ["player-1", "player-3"]


def test_add_player_menu_disabled_without_candidates(view):
    view.viewmodel.initialize("t1", User(id="u1"))
    zone = view.quarter_zones[0]
    for i in range(1, 6):
        zone.accept_player(f"player-{i}")
    view.viewmodel.set_player_availability("player-6", "unavailable")
    add_menu = zone.context_menu_for(None).findChild(QMenu, "plannerAddPlayerMenu")
    assert add_menu.actions() == []
    assert not add_menu.isEnabled()
