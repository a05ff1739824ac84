"""
Pydantic models for score engine data structures.

Contains the typed shapes that cross the engine boundary: player identity,
per-player round submissions and results, round records, standings and the
read models handed back to the presentation layer.
"""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scorekeeper.logic.enums import BonusStatus, ProgressionPhase, ScoringOutcome

Points = int | float


class Player(BaseModel):
    """A seated player. Identity is the id; the name is display-only."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str


class PlayerSubmission(BaseModel):
    """One player's entry for a round, already range-checked by the UI validator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bid: int = Field(ge=0, strict=True)
    tricks_taken: int = Field(ge=0, strict=True)
    bonus_declared: Points = 0

    @field_validator("bonus_declared")
    @classmethod
    def _finite_non_negative_bonus(cls, v: Points) -> Points:
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("bonus must be finite")
            # whole-number bonuses stay ints so totals stay integral
            if v.is_integer():
                v = int(v)
        if v < 0:
            raise ValueError("bonus must not be negative")
        return v


class RoundResult(BaseModel):
    """Scored outcome of one player's round. Computed once, never edited."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    bid: int
    tricks_taken: int
    bonus_declared: Points = 0
    base_score: int
    bonus_applied: Points = 0
    total_delta: Points
    outcome: ScoringOutcome
    bonus_status: BonusStatus = BonusStatus.NONE
    scoring_reason: str = ""


class RoundRecord(BaseModel):
    """A completed round in the append-only game history."""

    model_config = ConfigDict(frozen=True)

    round_number: int = Field(ge=1)
    cards_dealt: int = Field(ge=1)
    results: tuple[RoundResult, ...]
    recorded_at: datetime  # when the round was scored
    started_at: datetime | None = None

    def result_for(self, player_id: str) -> RoundResult | None:
        return next((r for r in self.results if r.player_id == player_id), None)

    def delta_for(self, player_id: str) -> Points:
        """Score change for a player; players absent from this round contribute 0."""
        result = self.result_for(player_id)
        return result.total_delta if result is not None else 0


class PlayerStanding(BaseModel):
    """Derived aggregate for one player. Recomputed from history, never stored."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    name: str
    total_score: Points
    rank: int = Field(ge=1)
    round_scores: tuple[Points, ...] = ()
    is_leader: bool = False


class FinalStanding(PlayerStanding):
    """Standing once the game has ended."""

    is_final_winner: bool = False


class PlayerHistory(BaseModel):
    """Individual score history for one player."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    name: str
    total_score: Points
    rank: int
    round_scores: tuple[Points, ...]
    average_score: float


class ScoreBreakdown(BaseModel):
    """Base versus bonus split of a player's total across all rounds."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    total_base_score: int
    total_bonus_applied: Points
    total_score: Points
    rounds_with_bonus: int
    rounds_played: int


class GameView(BaseModel):
    """Read model exposed to the presentation layer after every call."""

    model_config = ConfigDict(frozen=True)

    current_round: int
    total_rounds: int
    cards_dealt: int
    phase: ProgressionPhase
    viewing_round: int | None = None
    game_ended: bool
    standings: tuple[PlayerStanding, ...]
    round_history: tuple[RoundRecord, ...]


class GameSummary(BaseModel):
    """Complete game data: totals, history and leaders."""

    model_config = ConfigDict(frozen=True)

    rounds_played: int
    game_ended: bool
    standings: tuple[PlayerStanding, ...]
    round_history: tuple[RoundRecord, ...]
    leaders: tuple[PlayerStanding, ...]


class RoundProgress(BaseModel):
    """How far the game has got, by rounds and by hands dealt. Percentages are 0-100."""

    model_config = ConfigDict(frozen=True)

    completed_rounds: int
    total_rounds: int
    completed_hands: int
    total_hands: int
    overall_progress: float
    round_progress: float
