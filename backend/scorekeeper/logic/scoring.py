"""
Scoring calculation for bid-based trick-taking rounds.

Handles the bid-versus-tricks scoring table (including the zero-bid special
case) and the exact-bid bonus policy, and combines them into per-player
round results.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from scorekeeper.logic.enums import BonusStatus, ScoringOutcome
from scorekeeper.logic.exceptions import InvalidInputError
from scorekeeper.logic.settings import GameSettings
from scorekeeper.logic.types import RoundResult

if TYPE_CHECKING:
    from scorekeeper.logic.types import PlayerSubmission, Points

logger = structlog.get_logger()

_DEFAULT_SETTINGS = GameSettings()


def _require_count(name: str, value: object, *, minimum: int = 0) -> int:
    # bool is an int subclass; a checkbox value is never a trick count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidInputError(f"{name} must be at least {minimum}, got {value}")
    return value


def _validate_round_input(bid: object, tricks_taken: object, cards_dealt: object) -> tuple[int, int, int]:
    bid = _require_count("bid", bid)
    tricks_taken = _require_count("tricks_taken", tricks_taken)
    cards_dealt = _require_count("cards_dealt", cards_dealt, minimum=1)
    if bid > cards_dealt:
        raise InvalidInputError(f"bid {bid} exceeds cards dealt ({cards_dealt})")
    if tricks_taken > cards_dealt:
        raise InvalidInputError(f"tricks_taken {tricks_taken} exceeds cards dealt ({cards_dealt})")
    return bid, tricks_taken, cards_dealt


def classify_outcome(bid: int, tricks_taken: int, cards_dealt: int) -> ScoringOutcome:
    """Return which branch of the scoring table applies."""
    bid, tricks_taken, _ = _validate_round_input(bid, tricks_taken, cards_dealt)
    if bid == 0:
        return ScoringOutcome.ZERO_BID_SUCCESS if tricks_taken == 0 else ScoringOutcome.ZERO_BID_FAILURE
    if bid == tricks_taken:
        return ScoringOutcome.EXACT_BID
    return ScoringOutcome.MISSED_BID


def compute_base_score(
    bid: int,
    tricks_taken: int,
    cards_dealt: int,
    settings: GameSettings | None = None,
) -> int:
    """
    Score a player's round from their bid and the tricks they took.

    - Zero bid: +10 x cards dealt when no trick was taken, -10 x cards dealt otherwise.
    - Exact bid: +20 per trick taken.
    - Missed bid: -10 per trick of difference.

    Multipliers come from settings. Raises InvalidInputError for negative
    values, non-integers, or a bid / trick count above cards dealt.
    """
    rules = settings or _DEFAULT_SETTINGS
    outcome = classify_outcome(bid, tricks_taken, cards_dealt)

    if outcome == ScoringOutcome.ZERO_BID_SUCCESS:
        return rules.zero_bid_multiplier * cards_dealt
    if outcome == ScoringOutcome.ZERO_BID_FAILURE:
        return -rules.zero_bid_multiplier * cards_dealt
    if outcome == ScoringOutcome.EXACT_BID:
        return rules.exact_bid_points_per_trick * tricks_taken
    return -rules.missed_bid_penalty_per_trick * abs(bid - tricks_taken)


def _require_bonus(declared_bonus: object) -> Points:
    if isinstance(declared_bonus, bool) or not isinstance(declared_bonus, int | float):
        raise InvalidInputError(f"bonus must be a number, got {declared_bonus!r}")
    if not math.isfinite(declared_bonus):
        raise InvalidInputError(f"bonus must be finite, got {declared_bonus}")
    if declared_bonus < 0:
        raise InvalidInputError(f"bonus must not be negative, got {declared_bonus}")
    return declared_bonus


def apply_bonus(bid: int, tricks_taken: int, declared_bonus: Points) -> Points:
    """Return the bonus that counts: all of it on an exact bid, nothing otherwise."""
    bid = _require_count("bid", bid)
    tricks_taken = _require_count("tricks_taken", tricks_taken)
    declared_bonus = _require_bonus(declared_bonus)
    return declared_bonus if bid == tricks_taken else 0


def bonus_status(bid: int, tricks_taken: int, declared_bonus: Points) -> BonusStatus:
    bid = _require_count("bid", bid)
    tricks_taken = _require_count("tricks_taken", tricks_taken)
    declared_bonus = _require_bonus(declared_bonus)
    if declared_bonus == 0:
        return BonusStatus.NONE
    return BonusStatus.APPLIED if bid == tricks_taken else BonusStatus.IGNORED


def scoring_reason(
    bid: int,
    tricks_taken: int,
    cards_dealt: int,
    settings: GameSettings | None = None,
) -> str:
    """Human-readable explanation of how the base score was reached."""
    rules = settings or _DEFAULT_SETTINGS
    outcome = classify_outcome(bid, tricks_taken, cards_dealt)

    if outcome == ScoringOutcome.ZERO_BID_SUCCESS:
        points = rules.zero_bid_multiplier * cards_dealt
        return f"Zero bid success: +{rules.zero_bid_multiplier} x {cards_dealt} cards = +{points}"
    if outcome == ScoringOutcome.ZERO_BID_FAILURE:
        points = rules.zero_bid_multiplier * cards_dealt
        return f"Zero bid failure: -{rules.zero_bid_multiplier} x {cards_dealt} cards = -{points}"
    if outcome == ScoringOutcome.EXACT_BID:
        points = rules.exact_bid_points_per_trick * tricks_taken
        return f"Correct bid: +{rules.exact_bid_points_per_trick} x {tricks_taken} tricks = +{points}"
    difference = abs(bid - tricks_taken)
    points = rules.missed_bid_penalty_per_trick * difference
    return f"Incorrect bid: -{rules.missed_bid_penalty_per_trick} x {difference} difference = -{points}"


def score_submission(
    player_id: str,
    submission: PlayerSubmission,
    cards_dealt: int,
    settings: GameSettings | None = None,
) -> RoundResult:
    """Combine the base score and bonus policy into a RoundResult for one player."""
    bid = submission.bid
    tricks_taken = submission.tricks_taken
    declared = submission.bonus_declared

    base_score = compute_base_score(bid, tricks_taken, cards_dealt, settings)
    bonus_applied = apply_bonus(bid, tricks_taken, declared)

    result = RoundResult(
        player_id=player_id,
        bid=bid,
        tricks_taken=tricks_taken,
        bonus_declared=declared,
        base_score=base_score,
        bonus_applied=bonus_applied,
        total_delta=base_score + bonus_applied,
        outcome=classify_outcome(bid, tricks_taken, cards_dealt),
        bonus_status=bonus_status(bid, tricks_taken, declared),
        scoring_reason=scoring_reason(bid, tricks_taken, cards_dealt, settings),
    )
    logger.debug(
        "player scored",
        player_id=player_id,
        bid=bid,
        tricks_taken=tricks_taken,
        base_score=base_score,
        bonus_applied=bonus_applied,
        outcome=result.outcome,
    )
    return result
