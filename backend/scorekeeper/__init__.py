"""Round and score engine for bid-based trick-taking card games."""

from scorekeeper.logic.engine import ScoreEngine
from scorekeeper.logic.enums import BonusStatus, ProgressionPhase, ScoringOutcome
from scorekeeper.logic.exceptions import (
    InvalidInputError,
    NotFoundError,
    ScoreKeeperError,
    StateError,
    UnsupportedSettingsError,
)
from scorekeeper.logic.scoring import apply_bonus, compute_base_score
from scorekeeper.logic.settings import GameSettings
from scorekeeper.logic.standings import compute_standings
from scorekeeper.logic.types import (
    GameView,
    Player,
    PlayerStanding,
    PlayerSubmission,
    RoundProgress,
    RoundRecord,
    RoundResult,
)

__all__ = [
    "BonusStatus",
    "GameSettings",
    "GameView",
    "InvalidInputError",
    "NotFoundError",
    "Player",
    "PlayerStanding",
    "PlayerSubmission",
    "ProgressionPhase",
    "RoundProgress",
    "RoundRecord",
    "RoundResult",
    "ScoreEngine",
    "ScoreKeeperError",
    "ScoringOutcome",
    "StateError",
    "UnsupportedSettingsError",
    "apply_bonus",
    "compute_base_score",
    "compute_standings",
]
