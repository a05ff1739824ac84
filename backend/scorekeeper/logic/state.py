"""
Game state models for the score engine.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from scorekeeper.logic.enums import ProgressionPhase
from scorekeeper.logic.settings import GameSettings, cards_dealt_for_round
from scorekeeper.logic.types import Player, RoundRecord, RoundResult


class RoundState(BaseModel):
    """
    The round currently collecting input.

    One submission per player covers every hand of the round, so a round is
    either untouched (0 hands completed) or fully scored.
    """

    model_config = ConfigDict(frozen=True)

    round_number: int = Field(ge=1)
    hands_required: int = Field(ge=1)
    results: tuple[RoundResult, ...] = ()
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.results)

    @property
    def hands_completed(self) -> int:
        return self.hands_required if self.is_complete else 0


def new_round_state(round_number: int, started_at: datetime | None = None) -> RoundState:
    return RoundState(
        round_number=round_number,
        hands_required=cards_dealt_for_round(round_number),
        started_at=started_at,
    )


class GameState(BaseModel):
    """
    Represents the full game state across all rounds.
    """

    model_config = ConfigDict(frozen=True)

    players: tuple[Player, ...]
    rounds: tuple[RoundRecord, ...] = ()  # append-only history
    current_round: int = Field(default=1, ge=1)
    total_rounds: int = Field(ge=1)
    phase: ProgressionPhase = ProgressionPhase.AWAITING_SUBMISSIONS
    round_state: RoundState = Field(default_factory=lambda: new_round_state(1))
    viewing_round: int | None = None  # review cursor set by go_to_round, read-only
    settings: GameSettings = Field(default_factory=GameSettings)

    @property
    def game_ended(self) -> bool:
        return self.phase == ProgressionPhase.GAME_COMPLETE

    @property
    def cards_dealt(self) -> int:
        return cards_dealt_for_round(self.current_round)

    @property
    def player_ids(self) -> tuple[str, ...]:
        return tuple(p.id for p in self.players)

    def find_player(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)
