from __future__ import annotations

from collections.abc import Iterator, Sequence
from itertools import combinations

from .types import FEATURE_VALUES, FEATURES, Card, Slot


def feature_ok(values: Sequence[str]) -> bool:
    """All the same or all different; two-of-a-kind fails."""
    return len(set(values)) != 2


def is_set(a: Card, b: Card, c: Card) -> bool:
    return all(
        feature_ok(values) for values in zip(a.features(), b.features(), c.features())
    )


def is_set_of(cards: Sequence[Card]) -> bool:
    if len(cards) != 3 or len(set(cards)) != 3:
        return False
    return is_set(cards[0], cards[1], cards[2])


def find_sets(
    table: Sequence[Slot], excluded: frozenset[int] = frozenset()
) -> Iterator[tuple[int, int, int]]:
    """Yield ascending index triples of table slots whose cards form a set.

    Holes and slots listed in `excluded` are skipped.
    """
    live = [i for i, c in enumerate(table) if c is not None and i not in excluded]
    for i, j, k in combinations(live, 3):
        a, b, c = table[i], table[j], table[k]
        assert a is not None and b is not None and c is not None
        if is_set(a, b, c):
            yield (i, j, k)


def has_set(table: Sequence[Slot], excluded: frozenset[int] = frozenset()) -> bool:
    return next(find_sets(table, excluded), None) is not None


def third_card(a: Card, b: Card) -> Card:
    """The unique card completing a set with `a` and `b`."""
    values: dict[str, str] = {}
    for name, x, y in zip(FEATURES, a.features(), b.features()):
        if x == y:
            values[name] = x
        else:
            (values[name],) = [v for v in FEATURE_VALUES[name] if v not in (x, y)]
    return Card(**values)  # type: ignore[arg-type]
