from __future__ import annotations

import random

from setgame.engine.deck import DECK_SIZE, build_deck, ordered_deck
from setgame.engine.game import (
    GameConfig,
    GameState,
    deal_cards,
    is_game_over,
    live_table_cards,
    new_game,
    remove_matched_cards_from_table,
    reset,
    select_card,
    selection_phase,
)
from setgame.engine.rules import find_sets, has_set, is_set, third_card
from setgame.engine.types import Card


def _c(number: str, symbol: str, color: str, shading: str) -> Card:
    return Card(number=number, symbol=symbol, color=color, shading=shading)  # type: ignore[arg-type]


SET_TRIO = [
    _c("one", "diamond", "red", "solid"),
    _c("two", "diamond", "red", "solid"),
    _c("three", "diamond", "red", "solid"),
]

NON_SET_TRIO = [
    _c("one", "diamond", "red", "solid"),
    _c("one", "squiggle", "red", "solid"),
    _c("one", "diamond", "green", "solid"),
]


def _stacked_game(front: list[Card], seed: int = 1) -> GameState:
    """New game whose deck starts with `front`, in order."""
    state = new_game(seed=seed)
    rest = [c for c in state.deck if c not in front]
    state.deck = list(front) + rest
    return state


def _assert_partition(state: GameState) -> None:
    everything = state.deck + live_table_cards(state) + state.matched_deck
    assert len(everything) == DECK_SIZE
    assert len(set(everything)) == DECK_SIZE


def _assert_selection_invariants(state: GameState) -> None:
    assert len(state.selected_cards) <= 3
    assert len(set(state.selected_cards)) == len(state.selected_cards)
    on_table = {c for c in state.table_cards if c is not None}
    assert set(state.selected_cards) <= on_table
    if state.matched_cards:
        assert set(state.matched_cards) <= set(state.selected_cards)


def test_deck_is_complete_and_distinct() -> None:
    deck = build_deck(random.Random(3))
    assert len(deck) == 81
    assert len(set(deck)) == 81
    assert set(deck) == set(ordered_deck())


def test_build_deck_returns_independent_lists() -> None:
    a = build_deck(random.Random(1))
    b = build_deck(random.Random(1))
    assert a == b
    a.pop()
    assert len(b) == 81


def test_match_rule_examples() -> None:
    assert is_set(*SET_TRIO)
    assert not is_set(*NON_SET_TRIO)
    all_different = [
        _c("one", "diamond", "red", "solid"),
        _c("two", "squiggle", "green", "striped"),
        _c("three", "oval", "purple", "outlined"),
    ]
    assert is_set(*all_different)


def test_third_card_completes_a_set() -> None:
    rng = random.Random(9)
    deck = ordered_deck()
    for _ in range(50):
        a, b = rng.sample(deck, 2)
        c = third_card(a, b)
        assert c not in (a, b)
        assert is_set(a, b, c)


def test_find_sets_skips_holes_and_excluded_slots() -> None:
    table = [SET_TRIO[0], None, SET_TRIO[1], SET_TRIO[2]]
    assert list(find_sets(table)) == [(0, 2, 3)]
    assert not has_set(table, excluded=frozenset({2}))


def test_new_game_starts_empty() -> None:
    state = new_game(seed=11)
    assert len(state.deck) == 81
    assert state.table_cards == []
    assert state.score == 0
    assert selection_phase(state) == "empty"


def test_deal_partial_and_empty_deck() -> None:
    state = new_game(seed=5)
    dealt = deal_cards(state, 76)
    assert len(dealt) == 76
    assert len(state.deck) == 5

    dealt = deal_cards(state, 12)
    assert len(dealt) == 5
    assert state.deck == []
    assert len(state.table_cards) == 81

    assert deal_cards(state) == []
    assert deal_cards(state, 0) == []
    _assert_partition(state)


def test_default_deal_amount_is_three() -> None:
    state = new_game(seed=5)
    assert len(deal_cards(state)) == 3
    assert len(state.table_cards) == 3


def test_select_toggles_before_full() -> None:
    state = new_game(seed=2)
    deal_cards(state, 12)
    a, b = state.table_cards[0], state.table_cards[1]

    select_card(state, 0)
    select_card(state, 0)
    assert state.selected_cards == []

    select_card(state, 0)
    select_card(state, 1)
    select_card(state, 0)
    assert state.selected_cards == [b]
    assert a not in state.selected_cards
    assert selection_phase(state) == "partial"


def test_invalid_taps_are_noops() -> None:
    state = _stacked_game(SET_TRIO)
    deal_cards(state, 6)
    select_card(state, 3)
    before = (list(state.selected_cards), state.score, list(state.table_cards))

    assert select_card(state, -1) == []
    assert select_card(state, 6) == []
    assert select_card(state, 100) == []
    assert (list(state.selected_cards), state.score, list(state.table_cards)) == before

    state.table_cards[4] = None  # simulate a hole
    assert select_card(state, 4) == []
    assert state.selected_cards == before[0]


def test_match_scores_and_records_cards() -> None:
    state = _stacked_game(SET_TRIO)
    deal_cards(state, 12)
    for i in range(3):
        select_card(state, i)

    assert state.score == 3
    assert state.matched_cards == SET_TRIO
    assert state.matched_deck == SET_TRIO
    assert state.pending_removal == {0, 1, 2}
    assert selection_phase(state) == "full_match"
    # matched cards stay visible until removal
    assert state.table_cards[:3] == SET_TRIO
    _assert_partition(state)


def test_mismatch_penalizes_and_leaves_matched_deck() -> None:
    state = _stacked_game(NON_SET_TRIO)
    deal_cards(state, 12)
    for i in range(3):
        select_card(state, i)

    assert state.score == -1
    assert state.matched_cards == []
    assert state.matched_deck == []
    assert state.pending_removal == set()
    assert selection_phase(state) == "full_mismatch"


def test_score_is_not_clamped() -> None:
    state = _stacked_game(NON_SET_TRIO)
    deal_cards(state, 12)
    for _ in range(3):
        for i in range(3):
            select_card(state, i)
    assert state.score == -3


def test_next_tap_after_evaluation_starts_fresh_selection() -> None:
    state = _stacked_game(NON_SET_TRIO)
    deal_cards(state, 12)
    for i in range(3):
        select_card(state, i)

    select_card(state, 5)
    assert state.selected_cards == [state.table_cards[5]]
    assert state.matched_cards == []
    assert selection_phase(state) == "partial"

    # re-tapping one of an evaluated trio selects it afresh
    select_card(state, 5)
    for i in range(3):
        select_card(state, i)
    assert selection_phase(state) == "full_mismatch"
    select_card(state, 0)
    assert state.selected_cards == [NON_SET_TRIO[0]]


def test_tap_after_match_clears_markers_but_keeps_pending_slots() -> None:
    state = _stacked_game(SET_TRIO)
    deal_cards(state, 12)
    for i in range(3):
        select_card(state, i)

    # tapping a matched card awaiting removal changes nothing
    assert select_card(state, 1) == []
    assert len(state.selected_cards) == 3

    select_card(state, 7)
    assert state.selected_cards == [state.table_cards[7]]
    assert state.matched_cards == []
    assert state.pending_removal == {0, 1, 2}
    _assert_partition(state)
    _assert_selection_invariants(state)


def test_remove_matched_leaves_holes() -> None:
    state = _stacked_game(SET_TRIO)
    deal_cards(state, 12)
    tail = list(state.table_cards[3:])
    for i in range(3):
        select_card(state, i)

    emptied = remove_matched_cards_from_table(state)
    assert emptied == [0, 1, 2]
    assert state.table_cards[:3] == [None, None, None]
    assert state.table_cards[3:] == tail
    assert len(state.table_cards) == 12
    assert state.selected_cards == []
    assert state.matched_cards == []
    assert remove_matched_cards_from_table(state) == []
    _assert_partition(state)


def test_deal_reuses_holes_before_growing() -> None:
    state = _stacked_game(SET_TRIO)
    deal_cards(state, 12)
    for i in range(3):
        select_card(state, i)
    remove_matched_cards_from_table(state)

    dealt = deal_cards(state)
    assert len(dealt) == 3
    assert state.table_cards[:3] == dealt
    assert len(state.table_cards) == 12

    deal_cards(state)
    assert len(state.table_cards) == 15
    _assert_partition(state)


def test_deal_takes_pending_matched_cards_off_the_table() -> None:
    state = _stacked_game(SET_TRIO)
    deal_cards(state, 12)
    for i in range(3):
        select_card(state, i)

    dealt = deal_cards(state)
    assert state.table_cards[:3] == dealt
    assert not set(SET_TRIO) & {c for c in state.table_cards if c is not None}
    assert state.matched_deck == SET_TRIO
    assert state.selected_cards == []
    assert state.pending_removal == set()


def test_full_scenario() -> None:
    state = _stacked_game(SET_TRIO)
    dealt = deal_cards(state, 12)
    assert len(dealt) == 12
    assert all(c is not None for c in state.table_cards)
    assert len(state.deck) == 69
    assert state.score == 0

    for i in range(3):
        select_card(state, i)
    assert state.score == 3
    assert set(state.matched_cards) == set(SET_TRIO)
    assert set(state.matched_deck) == set(SET_TRIO)

    remove_matched_cards_from_table(state)
    assert state.table_cards[:3] == [None, None, None]
    assert state.selected_cards == []
    assert state.matched_cards == []

    refill = deal_cards(state)
    assert len(refill) == 3
    assert all(c is not None for c in state.table_cards)
    assert len(state.deck) == 66
    _assert_partition(state)


def test_reset_is_idempotent() -> None:
    state = _stacked_game(SET_TRIO)
    deal_cards(state, 12)
    for i in range(3):
        select_card(state, i)

    for _ in range(2):
        reset(state)
        assert state.score == 0
        assert state.table_cards == []
        assert state.selected_cards == []
        assert state.matched_cards == []
        assert state.matched_deck == []
        assert len(state.deck) == 81
        assert selection_phase(state) == "empty"
        _assert_partition(state)


def test_reset_with_seed_matches_new_game() -> None:
    state = new_game(seed=1)
    deal_cards(state, 12)
    reset(state, seed=42)
    assert state.seed == 42
    assert state.deck == new_game(seed=42).deck


def test_invariants_hold_under_random_play() -> None:
    rng = random.Random(2024)
    state = new_game(seed=99, config=GameConfig(match_reward=3, mismatch_penalty=1))
    deal_cards(state, 12)
    for _ in range(2000):
        roll = rng.random()
        if roll < 0.80:
            select_card(state, rng.randrange(-2, len(state.table_cards) + 2))
        elif roll < 0.90:
            deal_cards(state, rng.randrange(0, 6))
        elif roll < 0.99:
            remove_matched_cards_from_table(state)
        else:
            reset(state)
            deal_cards(state, 12)
        _assert_partition(state)
        _assert_selection_invariants(state)


def test_game_over_when_deck_empty_and_no_set() -> None:
    state = new_game(seed=8)
    deal_cards(state, 81)
    assert not is_game_over(state)  # 81 cards always contain a set

    state = new_game(seed=8)
    state.deck = []
    state.table_cards = [NON_SET_TRIO[0], NON_SET_TRIO[1], NON_SET_TRIO[2]]
    assert is_game_over(state)
