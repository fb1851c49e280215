"""Generic card list rendering.

One function renders any entity list; what varies per entity is supplied
as a ``CardCapability`` (how to build a card's markup, how to get its id)
instead of a renderer subclass per entity.

Markup is a small HTML fragment (Qt rich text subset). Every user-provided
field is escaped.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Callable, Generic, Iterable, Optional, Tuple, TypeVar

from gui.models import PlayerRecord, TeamEntry
from planning.lineup_planner import Availability, Player

__all__ = [
    "CardCapability",
    "RenderedCard",
    "RenderedList",
    "render_cards",
    "roster_entry_capability",
    "quarter_entry_capability",
    "player_record_capability",
    "team_capability",
    "status_label",
]

T = TypeVar("T")


@dataclass(frozen=True)
class CardCapability(Generic[T]):
    create_card: Callable[[T], str]
    id_of: Callable[[T], str]


@dataclass(frozen=True)
class RenderedCard:
    item_id: str
    markup: str


@dataclass(frozen=True)
class RenderedList:
    cards: Tuple[RenderedCard, ...] = ()
    empty_message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.cards

    def ids(self) -> list[str]:
        return [c.item_id for c in self.cards]


def render_cards(
    items: Iterable[T], capability: CardCapability[T], *, empty_message: str = "No items"
) -> RenderedList:
    cards = tuple(
        RenderedCard(item_id=capability.id_of(item), markup=capability.create_card(item))
        for item in items
    )
    if not cards:
        return RenderedList(cards=(), empty_message=empty_message)
    return RenderedList(cards=cards)


# Planner ------------------------------------------------------------------
_STATUS_LABELS = {
    Availability.AVAILABLE: "Called up",
    Availability.INJURED: "Injured",
    Availability.UNAVAILABLE: "Not called up",
}


def status_label(status: Availability) -> str:
    return _STATUS_LABELS[status]


def _number_prefix(player: Player) -> str:
    if not player.number:
        return ""
    return f"<b>{escape(player.number)}</b> "


def roster_entry_capability(
    status_of: Callable[[str], Availability],
) -> CardCapability[Player]:
    def create(player: Player) -> str:
        parts = [_number_prefix(player), escape(player.name)]
        if player.is_temporary:
            parts.append(" <i>(Temporary)</i>")
        status = status_of(player.id)
        if status is not Availability.AVAILABLE:
            parts.append(f" [{_STATUS_LABELS[status]}]")
        return "".join(parts)

    return CardCapability(create_card=create, id_of=lambda p: p.id)


def quarter_entry_capability() -> CardCapability[Player]:
    return CardCapability(
        create_card=lambda p: _number_prefix(p) + escape(p.name),
        id_of=lambda p: p.id,
    )


# Records ------------------------------------------------------------------
def _player_record_card(player: PlayerRecord) -> str:
    badge = f"<b>#{player.number}</b> " if player.number is not None else ""
    lines = [f"{badge}{escape(player.name)}", escape(player.position or "No position")]
    if player.birthdate:
        lines.append(escape(player.birthdate))
    if player.notes:
        lines.append(escape(player.notes))
    return "<br/>".join(lines)


def player_record_capability() -> CardCapability[PlayerRecord]:
    return CardCapability(create_card=_player_record_card, id_of=lambda p: p.id)


def team_capability() -> CardCapability[TeamEntry]:
    return CardCapability(create_card=lambda t: escape(t.name), id_of=lambda t: t.team_id)
