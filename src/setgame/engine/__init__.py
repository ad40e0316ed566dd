"""Deterministic, headless rules engine for SetGame.

IMPORTANT: This package must never import a rendering toolkit or do I/O.
"""

from .actions import DealCardsAction, RemoveMatchedAction, ResetAction, SelectCardAction
from .deck import build_deck
from .game import (
    GameConfig,
    GameState,
    deal_cards,
    new_game,
    remove_matched_cards_from_table,
    reset,
    select_card,
    step,
)
from .rules import find_sets, is_set
from .types import Card, Color, Number, Shading, Symbol

__all__ = [
    "Card",
    "Color",
    "DealCardsAction",
    "GameConfig",
    "GameState",
    "Number",
    "RemoveMatchedAction",
    "ResetAction",
    "SelectCardAction",
    "Shading",
    "Symbol",
    "build_deck",
    "deal_cards",
    "find_sets",
    "is_set",
    "new_game",
    "remove_matched_cards_from_table",
    "reset",
    "select_card",
    "step",
]
