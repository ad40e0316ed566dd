from __future__ import annotations

from setgame.engine.actions import (
    Action,
    DealCardsAction,
    RemoveMatchedAction,
    ResetAction,
    SelectCardAction,
)
from setgame.engine.ai import AISpec, choose_set
from setgame.engine.game import GameConfig, GameState, StepResult, is_game_over, new_game, step
from setgame.engine.serialize import card_to_dict
from setgame.services.config import ConfigService
from setgame.services.telemetry import TelemetryService


class PlaySession:
    """Headless controller a front end drives.

    Holds one game, forwards each engine step to telemetry, and owns the
    front-end policies (initial deal size, the "deal more" gating rule) that
    are not engine invariants.
    """

    def __init__(
        self,
        visible_slots: int,
        config: GameConfig | None = None,
        seed: int | None = None,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self.visible_slots = visible_slots
        self.telemetry = telemetry
        self.state: GameState = new_game(seed=seed, config=config)
        self._log("session_started", {"seed": self.state.seed, "visible_slots": visible_slots})
        self._apply(DealCardsAction(amount=self.state.config.initial_deal))

    @classmethod
    def from_config(
        cls,
        config: ConfigService,
        seed: int | None = None,
        telemetry: TelemetryService | None = None,
    ) -> "PlaySession":
        """Start a session with the rules and slot count from the shipped rules file."""
        defaults = config.load_session_defaults()
        return cls(
            visible_slots=defaults.visible_slots,
            config=config.load_game_config(),
            seed=seed,
            telemetry=telemetry,
        )

    def _log(self, event_type: str, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)

    def _apply(self, action: Action) -> StepResult:
        res = step(self.state, action)
        if self.telemetry is not None and res.events:
            self.telemetry.log_events(res.events)
        return res

    def tap_card(self, index: int) -> StepResult:
        return self._apply(SelectCardAction(index=index))

    def can_deal_more(self) -> bool:
        s = self.state
        if len(s.deck) <= 3:
            return False
        # matched cards stay on the table until removed, even after the next tap
        return len(s.table_cards) < self.visible_slots or bool(s.pending_removal)

    def deal_more(self) -> StepResult:
        if self.state.pending_removal:
            self._apply(RemoveMatchedAction())
        return self._apply(DealCardsAction(amount=self.state.config.deal_amount))

    def new_game(self, seed: int | None = None) -> StepResult:
        self._apply(ResetAction(seed=seed))
        return self._apply(DealCardsAction(amount=self.state.config.initial_deal))

    def hint(self, spec: AISpec | None = None) -> tuple[int, int, int] | None:
        return choose_set(self.state, spec or AISpec(difficulty=2))

    def is_over(self) -> bool:
        return is_game_over(self.state)

    def view(self) -> dict[str, object]:
        """Everything a renderer needs to redraw after a call."""
        s = self.state
        slots: list[dict[str, object] | None] = []
        for i, card in enumerate(s.table_cards):
            if card is None:
                slots.append(None)
                continue
            slots.append(
                {
                    "card": card_to_dict(card),
                    "selected": s.is_selected(card),
                    "matched": s.is_matched(card),
                    "pending_removal": i in s.pending_removal,
                }
            )
        return {
            "slots": slots,
            "score": s.score,
            "matches": len(s.matched_deck) // 3,
            "deck_remaining": len(s.deck),
            "can_deal_more": self.can_deal_more(),
            "game_over": self.is_over(),
        }
