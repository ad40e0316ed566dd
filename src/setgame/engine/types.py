from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

Number = Literal["one", "two", "three"]
Symbol = Literal["diamond", "squiggle", "oval"]
Color = Literal["red", "green", "purple"]
Shading = Literal["solid", "striped", "outlined"]

NUMBERS: tuple[Number, ...] = get_args(Number)
SYMBOLS: tuple[Symbol, ...] = get_args(Symbol)
COLORS: tuple[Color, ...] = get_args(Color)
SHADINGS: tuple[Shading, ...] = get_args(Shading)

FEATURES: tuple[str, ...] = ("number", "symbol", "color", "shading")

FEATURE_VALUES: dict[str, tuple[str, ...]] = {
    "number": NUMBERS,
    "symbol": SYMBOLS,
    "color": COLORS,
    "shading": SHADINGS,
}


@dataclass(frozen=True)
class Card:
    """One card: four independent features, each with exactly three values."""

    number: Number
    symbol: Symbol
    color: Color
    shading: Shading

    def features(self) -> tuple[str, str, str, str]:
        return (self.number, self.symbol, self.color, self.shading)

    def label(self) -> str:
        return f"{self.number}-{self.color}-{self.shading}-{self.symbol}"


# A table slot; None is a hole left by a removed card.
Slot = Card | None

SelectionPhase = Literal["empty", "partial", "full_unevaluated", "full_match", "full_mismatch"]
Evaluation = Literal["match", "mismatch"]
