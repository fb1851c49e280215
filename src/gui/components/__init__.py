"""GUI components package.

Presently exposes the generic card list renderer shared by the planner
roster, the quarter columns and the record pages.
"""

from __future__ import annotations

from .card_renderer import (
    CardCapability,
    RenderedCard,
    RenderedList,
    render_cards,
)

__all__ = [
    "CardCapability",
    "RenderedCard",
    "RenderedList",
    "render_cards",
]
