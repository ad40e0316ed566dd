from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DealCardsAction:
    amount: int = 3


@dataclass(frozen=True)
class SelectCardAction:
    index: int


@dataclass(frozen=True)
class RemoveMatchedAction:
    pass


@dataclass(frozen=True)
class ResetAction:
    seed: int | None = None


Action = DealCardsAction | SelectCardAction | RemoveMatchedAction | ResetAction
