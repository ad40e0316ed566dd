from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field

from .actions import Action, DealCardsAction, RemoveMatchedAction, ResetAction, SelectCardAction
from .deck import build_deck
from .rules import find_sets, is_set_of
from .types import Card, Evaluation, SelectionPhase, Slot

Event = dict[str, object]

SET_SIZE = 3


@dataclass(frozen=True)
class GameConfig:
    match_reward: int = 3
    mismatch_penalty: int = 1  # score is not clamped and may go negative
    initial_deal: int = 12
    deal_amount: int = 3

    def __post_init__(self) -> None:
        if self.match_reward < 0 or self.mismatch_penalty < 0:
            raise ValueError("Reward and penalty must be non-negative.")
        if self.initial_deal <= 0 or self.deal_amount <= 0:
            raise ValueError("Deal sizes must be positive.")


@dataclass
class GameState:
    config: GameConfig
    seed: int
    rng: random.Random
    deck: list[Card]
    table_cards: list[Slot] = field(default_factory=list)
    selected_cards: list[Card] = field(default_factory=list)
    matched_cards: list[Card] = field(default_factory=list)
    matched_deck: list[Card] = field(default_factory=list)
    score: int = 0
    pending_removal: set[int] = field(default_factory=set)
    last_evaluation: Evaluation | None = None
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def slot_of(self, card: Card) -> int | None:
        for i, c in enumerate(self.table_cards):
            if c == card:
                return i
        return None

    def is_selected(self, card: Card) -> bool:
        return card in self.selected_cards

    def is_matched(self, card: Card) -> bool:
        return card in self.matched_cards


def live_table_cards(state: GameState) -> list[Card]:
    """Cards on the table that are still in play (not holes, not pending removal)."""
    return [
        c
        for i, c in enumerate(state.table_cards)
        if c is not None and i not in state.pending_removal
    ]


def selection_phase(state: GameState) -> SelectionPhase:
    n = len(state.selected_cards)
    if n == 0:
        return "empty"
    if n < SET_SIZE:
        return "partial"
    if state.last_evaluation == "match":
        return "full_match"
    if state.last_evaluation == "mismatch":
        return "full_mismatch"
    return "full_unevaluated"


def is_game_over(state: GameState) -> bool:
    if state.deck:
        return False
    return next(find_sets(state.table_cards, frozenset(state.pending_removal)), None) is None


def _clear_selection(state: GameState) -> None:
    had_selection = bool(state.selected_cards)
    state.selected_cards.clear()
    state.matched_cards.clear()
    state.last_evaluation = None
    if had_selection:
        state.event_log.append({"type": "SELECTION_CLEARED"})


def _first_hole(table: list[Slot]) -> int | None:
    for i, c in enumerate(table):
        if c is None:
            return i
    return None


def remove_matched_cards_from_table(state: GameState) -> list[int]:
    """Empty the slots of matched cards still on the table.

    Slots become holes; later slots keep their positions. Clears selection and
    matched markers. Returns the emptied slot indices.
    """
    emptied = sorted(state.pending_removal)
    if not emptied:
        return []
    for slot in emptied:
        state.table_cards[slot] = None
    state.pending_removal.clear()
    _clear_selection(state)
    state.event_log.append({"type": "MATCHED_REMOVED", "slots": emptied})
    return emptied


def deal_cards(state: GameState, amount: int = 3) -> list[Card]:
    """Move up to `amount` cards from the front of the deck onto the table.

    Holes are filled lowest index first; the table only grows when no hole is
    left. A short or empty deck gives a partial or empty deal.
    """
    remove_matched_cards_from_table(state)
    dealt: list[Card] = []
    slots: list[int] = []
    while len(dealt) < amount and state.deck:
        card = state.deck.pop(0)
        slot = _first_hole(state.table_cards)
        if slot is None:
            state.table_cards.append(card)
            slot = len(state.table_cards) - 1
        else:
            state.table_cards[slot] = card
        dealt.append(card)
        slots.append(slot)
    if dealt:
        state.event_log.append(
            {"type": "CARDS_DEALT", "slots": slots, "deck_remaining": len(state.deck)}
        )
    return dealt


def _evaluate(state: GameState) -> None:
    trio = list(state.selected_cards)
    if is_set_of(trio):
        state.score += state.config.match_reward
        state.matched_deck.extend(trio)
        state.matched_cards = list(trio)
        for card in trio:
            slot = state.slot_of(card)
            assert slot is not None
            state.pending_removal.add(slot)
        state.last_evaluation = "match"
        state.event_log.append(
            {"type": "SET_FOUND", "reward": state.config.match_reward, "score": state.score}
        )
    else:
        state.score -= state.config.mismatch_penalty
        state.matched_cards.clear()
        state.last_evaluation = "mismatch"
        state.event_log.append(
            {"type": "SET_REJECTED", "penalty": state.config.mismatch_penalty, "score": state.score}
        )


def select_card(state: GameState, index: int) -> list[Event]:
    """Apply one tap on table slot `index` to the selection state machine.

    Taps on an index out of range, a hole or a matched card awaiting removal
    change nothing. Returns the events produced by this tap.
    """
    if index < 0 or index >= len(state.table_cards):
        return []
    card = state.table_cards[index]
    if card is None or index in state.pending_removal:
        return []

    start = len(state.event_log)
    if len(state.selected_cards) >= SET_SIZE:
        _clear_selection(state)

    if card in state.selected_cards:
        state.selected_cards.remove(card)
        state.event_log.append({"type": "CARD_DESELECTED", "slot": index})
        return state.event_log[start:]

    state.selected_cards.append(card)
    state.event_log.append({"type": "CARD_SELECTED", "slot": index})
    if len(state.selected_cards) == SET_SIZE:
        _evaluate(state)
    return state.event_log[start:]


def _initialize(state: GameState) -> None:
    state.deck = build_deck(state.rng)
    state.table_cards = []
    state.selected_cards = []
    state.matched_cards = []
    state.matched_deck = []
    state.pending_removal = set()
    state.last_evaluation = None
    state.score = 0


def reset(state: GameState, seed: int | None = None) -> None:
    """Start over: fresh shuffled deck, empty table, score 0.

    With a new `seed` the RNG is re-seeded; otherwise it keeps advancing.
    """
    if seed is not None:
        state.seed = seed
        state.rng = random.Random(seed)
    _initialize(state)
    state.event_log.append({"type": "GAME_RESET", "seed": state.seed})


def new_game(seed: int | None = None, config: GameConfig | None = None) -> GameState:
    if seed is None:
        seed = random.randrange(2**32)
    rng = random.Random(seed)
    state = GameState(config=config or GameConfig(), seed=seed, rng=rng, deck=[])
    _initialize(state)
    return state


@dataclass
class StepResult:
    changed: bool
    events: list[Event]
    dealt: list[Card] = field(default_factory=list)


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single action to the game state.

    This mutates `state` in-place but remains deterministic for a given
    (seed, config, action sequence).
    """
    # Log first, so replay has a full record of attempted actions
    state.action_log.append(action)
    start = len(state.event_log)
    dealt: list[Card] = []

    if isinstance(action, SelectCardAction):
        select_card(state, action.index)
    elif isinstance(action, DealCardsAction):
        dealt = deal_cards(state, action.amount)
    elif isinstance(action, RemoveMatchedAction):
        remove_matched_cards_from_table(state)
    elif isinstance(action, ResetAction):
        reset(state, action.seed)

    events = state.event_log[start:]
    return StepResult(changed=bool(events), events=events, dealt=dealt)


def replay(
    seed: int,
    actions: Iterable[Action],
    config: GameConfig | None = None,
) -> GameState:
    state = new_game(seed=seed, config=config)
    for a in actions:
        step(state, a)
    return state
