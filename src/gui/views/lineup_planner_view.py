"""Lineup Planner View

Widget hosting the quarter planner:
 - team selector (hidden when the team comes from the URL or in guest mode)
 - roster list (drag source, ``text/plain`` mime data carries the player id)
   with a call-up status selector per player
 - one drop zone per quarter (double-click or context menu to remove)
 - temporary player form, match type selector and a one-line error label

The widget holds no planner state. It forwards user intents to
``LineupPlannerViewModel`` and re-renders whenever the view model announces
a change on the event bus.
"""

from __future__ import annotations

from typing import Callable, List

from PyQt6.QtCore import QMimeData, Qt
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMenu,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from config import settings
from gui.components.card_renderer import RenderedCard, RenderedList, status_label
from gui.services.event_bus import Event, EventBus, GUIEvent, Subscription
from gui.viewmodels.lineup_planner_viewmodel import LineupPlannerViewModel
from planning.lineup_planner import Availability, Player

__all__ = ["LineupPlannerView", "RosterListWidget", "QuarterDropZone", "PLAYER_MIME"]

PLAYER_MIME = "text/plain"
_ID_ROLE = Qt.ItemDataRole.UserRole


def _card_label(card: RenderedCard) -> QWidget:
    label = QLabel(card.markup)
    label.setTextFormat(Qt.TextFormat.RichText)
    return label


def _fill(
    widget: QListWidget,
    rendered: RenderedList,
    row_factory: Callable[[RenderedCard], QWidget] = _card_label,
) -> None:
    widget.clear()
    if rendered.is_empty:
        placeholder = QListWidgetItem(rendered.empty_message or "")
        placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
        widget.addItem(placeholder)
        return
    for card in rendered.cards:
        item = QListWidgetItem()
        item.setData(_ID_ROLE, card.item_id)
        row = row_factory(card)
        item.setSizeHint(row.sizeHint())
        widget.addItem(item)
        widget.setItemWidget(item, row)


class RosterListWidget(QListWidget):
    """Drag source; each dragged item carries its player id as plain text."""

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("plannerRosterList")
        self.setDragEnabled(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DragOnly)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)

    def mimeTypes(self) -> List[str]:  # noqa: N802 (Qt override)
        return [PLAYER_MIME]

    def mimeData(self, items) -> QMimeData:  # noqa: N802
        data = QMimeData()
        ids = [i.data(_ID_ROLE) for i in items if i.data(_ID_ROLE)]
        if ids:
            data.setText(ids[0])
        return data


class QuarterDropZone(QListWidget):
    """Accepts plain-text drops and forwards ``(quarter_index, player_id)``.

    Double-clicking an entry removes it; the context menu offers removal and
    an "Add player" submenu listing the players still addable to this quarter.
    """

    def __init__(
        self,
        quarter_index: int,
        on_drop: Callable[[int, str], object],
        on_remove: Callable[[int, str], object],
        candidates: Callable[[int], List[Player]],
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.quarter_index = quarter_index
        self._on_drop = on_drop
        self._on_remove = on_remove
        self._candidates = candidates
        self.setObjectName(f"plannerQuarter{quarter_index + 1}")
        self.setAcceptDrops(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DropOnly)
        self.itemDoubleClicked.connect(self._on_item_double_clicked)

    def dragEnterEvent(self, event):  # noqa: N802
        if event.mimeData().hasText():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):  # noqa: N802
        if event.mimeData().hasText():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event):  # noqa: N802
        player_id = event.mimeData().text().strip()
        if not player_id:
            event.ignore()
            return
        event.acceptProposedAction()
        self.accept_player(player_id)

    def accept_player(self, player_id: str) -> None:
        self._on_drop(self.quarter_index, player_id)

    def remove_player(self, player_id: str) -> None:
        self._on_remove(self.quarter_index, player_id)

    def _on_item_double_clicked(self, item: QListWidgetItem) -> None:
        player_id = item.data(_ID_ROLE)
        if player_id:
            self.remove_player(player_id)

    # Context menu ---------------------------------------------------------
    def context_menu_for(self, item: QListWidgetItem | None) -> QMenu:
        menu = QMenu(self)
        player_id = item.data(_ID_ROLE) if item is not None else None
        if player_id:
            remove = menu.addAction("Remove from quarter")
            remove.triggered.connect(lambda _checked=False, pid=player_id: self.remove_player(pid))
        add_menu = menu.addMenu("Add player")
        add_menu.setObjectName("plannerAddPlayerMenu")
        candidates = self._candidates(self.quarter_index)
        for player in candidates:
            text = f"{player.number} {player.name}" if player.number else player.name
            action = add_menu.addAction(text)
            action.triggered.connect(lambda _checked=False, pid=player.id: self.accept_player(pid))
        add_menu.setEnabled(bool(candidates))
        return menu

    def contextMenuEvent(self, event):  # noqa: N802
        menu = self.context_menu_for(self.itemAt(event.pos()))
        menu.exec(event.globalPos())


class LineupPlannerView(QWidget):
    """Planner page. Public API: ``refresh()``, ``close_subscriptions()``."""

    def __init__(
        self, viewmodel: LineupPlannerViewModel, bus: EventBus, parent: QWidget | None = None
    ):
        super().__init__(parent)
        self.viewmodel = viewmodel
        self._bus = bus
        self.quarter_zones: List[QuarterDropZone] = []
        self._subs: List[Subscription] = []
        self._build_ui()
        self._subscribe()
        self.refresh()

    # UI -----------------------------------------------------------------
    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        self.title_label = QLabel("Lineup Planner")
        self.title_label.setObjectName("viewTitleLabel")
        root.addWidget(self.title_label)

        top = QHBoxLayout()
        self.team_combo = QComboBox()
        self.team_combo.setObjectName("plannerTeamSelector")
        self.team_combo.currentIndexChanged.connect(self._on_team_index_changed)
        top.addWidget(self.team_combo, 1)
        self.match_type_combo = QComboBox()
        self.match_type_combo.setObjectName("plannerMatchType")
        for key in settings.MATCH_TYPES:
            self.match_type_combo.addItem(key.capitalize(), key)
        self.match_type_combo.currentIndexChanged.connect(self._on_match_type_changed)
        top.addWidget(self.match_type_combo)
        root.addLayout(top)

        self.error_label = QLabel("")
        self.error_label.setObjectName("plannerErrorLabel")
        self.error_label.setWordWrap(False)
        self.error_label.hide()
        root.addWidget(self.error_label)

        body = QHBoxLayout()
        roster_box = QGroupBox("Players")
        roster_layout = QVBoxLayout(roster_box)
        self.roster_list = RosterListWidget()
        roster_layout.addWidget(self.roster_list)
        form = QHBoxLayout()
        self.temp_name_edit = QLineEdit()
        self.temp_name_edit.setPlaceholderText("Temporary player name")
        self.temp_name_edit.textChanged.connect(lambda v: self.viewmodel.update_form("name", v))
        self.temp_number_edit = QLineEdit()
        self.temp_number_edit.setPlaceholderText("No.")
        self.temp_number_edit.setMaximumWidth(60)
        self.temp_number_edit.textChanged.connect(
            lambda v: self.viewmodel.update_form("number", v)
        )
        self.add_temp_button = QPushButton("Add")
        self.add_temp_button.clicked.connect(self._on_add_temporary)
        form.addWidget(self.temp_name_edit, 1)
        form.addWidget(self.temp_number_edit)
        form.addWidget(self.add_temp_button)
        roster_layout.addLayout(form)
        body.addWidget(roster_box, 1)

        self.quarters_box = QGroupBox("Quarters")
        self.quarters_grid = QGridLayout(self.quarters_box)
        body.addWidget(self.quarters_box, 2)
        root.addLayout(body, 1)

    def _subscribe(self) -> None:
        b = self._bus
        self._subs = [
            b.subscribe(GUIEvent.ROSTER_CHANGED, lambda _e: self._render_roster()),
            b.subscribe(GUIEvent.QUARTERS_CHANGED, lambda _e: self._render_quarters()),
            b.subscribe(GUIEvent.TEAMS_LOADED, lambda _e: self._render_teams()),
            b.subscribe(GUIEvent.TEAM_SELECTED, lambda _e: self._render_teams()),
            b.subscribe(GUIEvent.PLANNER_ENABLED_CHANGED, lambda _e: self._render_enabled()),
            b.subscribe(GUIEvent.FORM_RESET, lambda _e: self._clear_form()),
            b.subscribe(GUIEvent.ERROR_OCCURRED, self._on_error),
            b.subscribe(GUIEvent.ERROR_CLEARED, lambda _e: self._on_error_cleared()),
        ]

    def close_subscriptions(self) -> None:
        for sub in self._subs:
            sub.cancel()
        self._subs = []

    # Rendering ------------------------------------------------------------
    def refresh(self) -> None:
        self._render_teams()
        self._render_enabled()
        self._render_roster()
        self._render_quarters()
        if self.viewmodel.errors.visible:
            self.error_label.setText(self.viewmodel.errors.message or "")
            self.error_label.show()

    def _render_teams(self) -> None:
        self.team_combo.blockSignals(True)
        try:
            self.team_combo.clear()
            self.team_combo.addItem("Select a team", None)
            for team in self.viewmodel.teams:
                self.team_combo.addItem(team.name, team.team_id)
            index = self.team_combo.findData(self.viewmodel.team_id)
            self.team_combo.setCurrentIndex(max(index, 0))
        finally:
            self.team_combo.blockSignals(False)
        self.team_combo.setVisible(self.viewmodel.shows_team_selector)

    def _render_enabled(self) -> None:
        enabled = self.viewmodel.enabled
        self.roster_list.setEnabled(enabled)
        self.quarters_box.setEnabled(enabled)
        self.add_temp_button.setEnabled(enabled)

    def _render_roster(self) -> None:
        _fill(self.roster_list, self.viewmodel.roster_cards(), self._roster_row)

    def _roster_row(self, card: RenderedCard) -> QWidget:
        row = QWidget()
        layout = QHBoxLayout(row)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.addWidget(_card_label(card), 1)
        combo = QComboBox()
        combo.setObjectName("plannerStatusSelector")
        for status in Availability:
            combo.addItem(status_label(status), status.value)
        current = self.viewmodel.planner.get_player_availability(card.item_id)
        combo.setCurrentIndex(combo.findData(current.value))
        combo.currentIndexChanged.connect(
            lambda i, pid=card.item_id, c=combo: self.viewmodel.set_player_availability(
                pid, c.itemData(i)
            )
        )
        layout.addWidget(combo)
        return row

    def _render_quarters(self) -> None:
        count = self.viewmodel.planner.quarter_count
        while len(self.quarter_zones) > count:
            zone = self.quarter_zones.pop()
            self.quarters_grid.removeWidget(zone)
            zone.deleteLater()
        while len(self.quarter_zones) < count:
            index = len(self.quarter_zones)
            zone = QuarterDropZone(
                index,
                self.viewmodel.handle_drop,
                self.viewmodel.remove_from_quarter,
                self.viewmodel.candidates_for_quarter,
            )
            zone.setToolTip(f"Quarter {index + 1}")
            self.quarters_grid.addWidget(zone, index // 2, index % 2)
            self.quarter_zones.append(zone)
        for zone in self.quarter_zones:
            _fill(zone, self.viewmodel.quarter_cards(zone.quarter_index))

    # Slots ----------------------------------------------------------------
    def _on_team_index_changed(self, index: int) -> None:
        self.viewmodel.select_team(self.team_combo.itemData(index))

    def _on_match_type_changed(self, index: int) -> None:
        self.viewmodel.change_match_type(self.match_type_combo.itemData(index))

    def _on_add_temporary(self) -> None:
        self.viewmodel.add_temporary_player()

    def _clear_form(self) -> None:
        for edit in (self.temp_name_edit, self.temp_number_edit):
            edit.blockSignals(True)
            edit.clear()
            edit.blockSignals(False)

    def _on_error(self, event: Event) -> None:
        self.error_label.setText(str(event.payload or ""))
        self.error_label.show()

    def _on_error_cleared(self) -> None:
        self.error_label.clear()
        self.error_label.hide()
