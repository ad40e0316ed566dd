from __future__ import annotations

from collections.abc import Mapping

from .actions import Action, DealCardsAction, RemoveMatchedAction, ResetAction, SelectCardAction
from .game import GameState, selection_phase
from .types import FEATURE_VALUES, FEATURES, Card, Slot


def card_to_dict(c: Card) -> dict[str, str]:
    return {"number": c.number, "symbol": c.symbol, "color": c.color, "shading": c.shading}


def card_from_dict(d: Mapping[str, object]) -> Card:
    values: dict[str, str] = {}
    for name in FEATURES:
        v = d.get(name)
        if not isinstance(v, str) or v not in FEATURE_VALUES[name]:
            raise ValueError(f"Invalid {name}: {v!r}")
        values[name] = v
    return Card(**values)  # type: ignore[arg-type]


def _slot_to_dict(s: Slot) -> dict[str, str] | None:
    if s is None:
        return None
    return card_to_dict(s)


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, SelectCardAction):
        return {"type": "select", "index": a.index}
    if isinstance(a, DealCardsAction):
        return {"type": "deal", "amount": a.amount}
    if isinstance(a, RemoveMatchedAction):
        return {"type": "remove_matched"}
    if isinstance(a, ResetAction):
        return {"type": "reset", "seed": a.seed}
    # should be unreachable
    return {"type": "unknown"}


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    return {
        "seed": state.seed,
        "score": state.score,
        "deck": [card_to_dict(c) for c in state.deck],
        "table": [_slot_to_dict(s) for s in state.table_cards],
        "selected": [card_to_dict(c) for c in state.selected_cards],
        "matched": [card_to_dict(c) for c in state.matched_cards],
        "matched_deck": [card_to_dict(c) for c in state.matched_deck],
        "pending_removal": sorted(state.pending_removal),
        "phase": selection_phase(state),
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
