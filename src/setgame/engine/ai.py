from __future__ import annotations

import random
from dataclasses import dataclass

from .actions import SelectCardAction
from .game import GameState, StepResult, step
from .rules import find_sets


@dataclass(frozen=True)
class AISpec:
    """Simple solver tuning parameters.

    difficulty:
      0 = easy (often overlooks a set)
      1 = normal
      2 = hard (never misses)
    """

    difficulty: int = 1


def _miss_chance(spec: AISpec) -> float:
    if spec.difficulty <= 0:
        return 0.35
    if spec.difficulty == 1:
        return 0.10
    return 0.0


def choose_set(
    state: GameState, spec: AISpec | None = None, rng: random.Random | None = None
) -> tuple[int, int, int] | None:
    """Pick the slot indices of a set among the live table cards, if any.

    The default RNG is derived from the seed and the action history, so choices
    are deterministic and never disturb the deck RNG (`state.rng`).
    """
    spec = spec or AISpec()
    rng = rng or random.Random(state.seed * 1_000_003 + len(state.action_log))
    candidates = list(find_sets(state.table_cards, frozenset(state.pending_removal)))
    if not candidates:
        return None
    miss = _miss_chance(spec)
    if miss and rng.random() < miss:
        return None
    return candidates[rng.randrange(len(candidates))]


def ai_play_set(state: GameState, spec: AISpec | None = None) -> list[StepResult]:
    """Select the three cards of a chosen set; returns the step results."""
    chosen = choose_set(state, spec)
    if chosen is None:
        return []
    if len(state.selected_cards) not in (0, 3):
        # Start from an empty selection so the three taps form the trio.
        for card in list(state.selected_cards):
            slot = state.slot_of(card)
            assert slot is not None
            step(state, SelectCardAction(index=slot))
    return [step(state, SelectCardAction(index=i)) for i in chosen]
