from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from scorekeeper.logic.engine import ScoreEngine
from scorekeeper.logic.progression import init_game
from scorekeeper.logic.scoring import score_submission
from scorekeeper.logic.settings import GameSettings
from scorekeeper.logic.types import Player, PlayerSubmission, RoundRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorekeeper.logic.state import GameState

FIXED_TIME = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)


# ============================================================================
# Test State Builder Helpers
# ============================================================================


def create_players(*ids: str) -> list[Player]:
    """Players whose display name is the upper-cased id."""
    return [Player(id=pid, name=pid.upper()) for pid in ids or ("a", "b", "c")]


def create_round_record(
    round_number: int,
    entries: dict[str, tuple[int, int] | tuple[int, int, int]],
    *,
    settings: GameSettings | None = None,
) -> RoundRecord:
    """Score a round from {player_id: (bid, tricks[, bonus])} and wrap it in a record."""
    results = []
    for player_id, values in entries.items():
        bid, tricks, *bonus = values
        submission = PlayerSubmission(bid=bid, tricks_taken=tricks, bonus_declared=bonus[0] if bonus else 0)
        results.append(score_submission(player_id, submission, round_number, settings))
    return RoundRecord(
        round_number=round_number,
        cards_dealt=round_number,
        results=tuple(results),
        recorded_at=FIXED_TIME,
    )


def create_game_state(
    players: Sequence[Player] | None = None,
    *,
    total_rounds: int = 10,
    settings: GameSettings | None = None,
) -> GameState:
    return init_game(players or create_players(), settings, total_rounds)


def entries(**values: tuple[int, int] | tuple[int, int, int]) -> dict[str, dict[str, int]]:
    """Build engine submission mappings: entries(a=(1, 1), b=(0, 0, 5))."""
    built = {}
    for player_id, (bid, tricks, *bonus) in values.items():
        entry = {"bid": bid, "tricks_taken": tricks}
        if bonus:
            entry["bonus_declared"] = bonus[0]
        built[player_id] = entry
    return built


@pytest.fixture
def engine() -> ScoreEngine:
    """Engine seated with players a, b, c over three rounds."""
    eng = ScoreEngine(game_id="test-game", clock=lambda: FIXED_TIME)
    eng.initialize(create_players("a", "b", "c"), total_rounds=3)
    return eng
