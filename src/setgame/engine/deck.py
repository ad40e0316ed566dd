from __future__ import annotations

import random
from itertools import product

from .types import COLORS, NUMBERS, SHADINGS, SYMBOLS, Card

DECK_SIZE = len(NUMBERS) * len(SYMBOLS) * len(COLORS) * len(SHADINGS)


def ordered_deck() -> list[Card]:
    """Every feature combination exactly once, in product order."""
    return [
        Card(number=n, symbol=s, color=c, shading=sh)
        for n, s, c, sh in product(NUMBERS, SYMBOLS, COLORS, SHADINGS)
    ]


def build_deck(rng: random.Random | None = None) -> list[Card]:
    """Return a freshly shuffled 81-card deck.

    Each call builds a new list, so decks from earlier games are never shared.
    """
    cards = ordered_deck()
    (rng or random.Random()).shuffle(cards)
    return cards
