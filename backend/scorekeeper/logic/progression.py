"""
Round progression state machine.

AWAITING_SUBMISSIONS(n) -> ROUND_COMPLETE(n) -> AWAITING_SUBMISSIONS(n+1) -> ... -> GAME_COMPLETE

Every transition takes a frozen GameState and returns a new one; the input
state is never mutated, so a rejected transition leaves the caller's state
exactly as it was.
"""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from scorekeeper.logic.enums import ProgressionPhase
from scorekeeper.logic.exceptions import InvalidInputError, StateError
from scorekeeper.logic.settings import GameSettings, cards_dealt_for_round, validate_settings
from scorekeeper.logic.state import GameState, new_round_state
from scorekeeper.logic.types import Player, RoundProgress, RoundRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorekeeper.logic.types import RoundResult

logger = structlog.get_logger()


def require_phase(state: GameState, operation: str, *allowed: ProgressionPhase) -> None:
    if state.phase not in allowed:
        expected = " or ".join(f"{p.value}" for p in allowed)
        logger.warning("transition rejected", operation=operation, phase=state.phase)
        raise StateError(
            operation=operation,
            expected=expected,
            actual=f"{state.phase.value}(round {state.current_round})",
        )


def init_game(
    players: Sequence[Player],
    settings: GameSettings | None = None,
    total_rounds: int | None = None,
    *,
    started_at: datetime | None = None,
) -> GameState:
    """
    Build the initial state: AWAITING_SUBMISSIONS for round 1.

    total_rounds overrides settings.total_rounds when given. Raises
    InvalidInputError for a player count outside the configured bounds,
    duplicate player ids, or fewer than one round.
    """
    game_settings = settings or GameSettings()
    if total_rounds is not None:
        # model_copy skips validation, so check the override by hand
        if isinstance(total_rounds, bool) or not isinstance(total_rounds, int):
            raise InvalidInputError(f"total_rounds must be an integer, got {total_rounds!r}")
        game_settings = game_settings.model_copy(update={"total_rounds": total_rounds})

    if game_settings.total_rounds < 1:
        raise InvalidInputError(f"total_rounds must be at least 1, got {game_settings.total_rounds}")
    validate_settings(game_settings)

    count = len(players)
    if count < max(1, game_settings.min_players):
        raise InvalidInputError(f"at least {max(1, game_settings.min_players)} players required, got {count}")
    if count > game_settings.max_players:
        raise InvalidInputError(f"at most {game_settings.max_players} players allowed, got {count}")

    duplicates = sorted(pid for pid, n in Counter(p.id for p in players).items() if n > 1)
    if duplicates:
        raise InvalidInputError(f"duplicate player ids: {', '.join(duplicates)}")

    return GameState(
        players=tuple(players),
        total_rounds=game_settings.total_rounds,
        round_state=new_round_state(1, started_at or datetime.now(tz=UTC)),
        settings=game_settings,
    )


def can_advance(state: GameState) -> bool:
    """True iff the current round's results are fully populated."""
    return state.phase == ProgressionPhase.ROUND_COMPLETE and state.round_state.is_complete


def round_progress(state: GameState) -> RoundProgress:
    """
    Summarize progress through the game.

    Hands are counted by cards dealt: the whole game has 1 + 2 + ... +
    total_rounds hands, and a recorded round contributes all of its hands.
    """
    completed_rounds = len(state.rounds)
    completed_hands = sum(record.cards_dealt for record in state.rounds)
    total_hands = sum(cards_dealt_for_round(n) for n in range(1, state.total_rounds + 1))
    return RoundProgress(
        completed_rounds=completed_rounds,
        total_rounds=state.total_rounds,
        completed_hands=completed_hands,
        total_hands=total_hands,
        overall_progress=completed_hands / total_hands * 100 if total_hands else 0.0,
        round_progress=completed_rounds / state.total_rounds * 100,
    )


def submit_round(
    state: GameState,
    results: Sequence[RoundResult],
    recorded_at: datetime | None = None,
) -> GameState:
    """
    Record the current round and move to ROUND_COMPLETE.

    Requires exactly one result per active player.
    """
    require_phase(state, "submit_round", ProgressionPhase.AWAITING_SUBMISSIONS)

    expected_ids = set(state.player_ids)
    submitted = [r.player_id for r in results]
    repeated = sorted(pid for pid, n in Counter(submitted).items() if n > 1)
    if repeated:
        raise InvalidInputError(f"more than one result for: {', '.join(repeated)}")
    missing = [pid for pid in state.player_ids if pid not in submitted]
    if missing:
        raise InvalidInputError(f"missing results for: {', '.join(missing)}")
    extra = sorted(set(submitted) - expected_ids)
    if extra:
        raise InvalidInputError(f"results for players not in the game: {', '.join(extra)}")

    # keep results in seating order regardless of submission order
    order = {pid: i for i, pid in enumerate(state.player_ids)}
    ordered = tuple(sorted(results, key=lambda r: order[r.player_id]))

    completed_at = recorded_at or datetime.now(tz=UTC)
    record = RoundRecord(
        round_number=state.current_round,
        cards_dealt=cards_dealt_for_round(state.current_round),
        results=ordered,
        recorded_at=completed_at,
        started_at=state.round_state.started_at,
    )

    return state.model_copy(
        update={
            "rounds": (*state.rounds, record),
            "phase": ProgressionPhase.ROUND_COMPLETE,
            "round_state": state.round_state.model_copy(update={"results": ordered, "completed_at": completed_at}),
            "viewing_round": None,
        }
    )


def advance(state: GameState, started_at: datetime | None = None) -> GameState:
    """
    Leave ROUND_COMPLETE: start the next round, or finish after the last one.
    """
    require_phase(state, "advance_round", ProgressionPhase.ROUND_COMPLETE)

    if state.current_round >= state.total_rounds:
        return end_game(state)

    next_round = state.current_round + 1
    return state.model_copy(
        update={
            "current_round": next_round,
            "phase": ProgressionPhase.AWAITING_SUBMISSIONS,
            "round_state": new_round_state(next_round, started_at or datetime.now(tz=UTC)),
            "viewing_round": None,
        }
    )


def go_to_round(state: GameState, target: int) -> GameState:
    """
    Point the review cursor at an earlier (or the current) round.

    Review only: a recorded round is never re-opened for editing, and
    skipping ahead of the current round is rejected.
    """
    require_phase(
        state,
        "go_to_round",
        ProgressionPhase.AWAITING_SUBMISSIONS,
        ProgressionPhase.ROUND_COMPLETE,
    )
    if isinstance(target, bool) or not isinstance(target, int):
        raise InvalidInputError(f"round must be an integer, got {target!r}")
    if target < 1:
        raise InvalidInputError(f"round must be at least 1, got {target}")
    if target > state.current_round:
        raise InvalidInputError(f"cannot skip ahead to round {target}; current round is {state.current_round}")

    viewing = None if target == state.current_round else target
    return state.model_copy(update={"viewing_round": viewing})


def return_to_current(state: GameState) -> GameState:
    return state.model_copy(update={"viewing_round": None})


def end_game(state: GameState) -> GameState:
    """Move to GAME_COMPLETE. Idempotent."""
    if state.game_ended:
        return state
    return state.model_copy(
        update={
            "phase": ProgressionPhase.GAME_COMPLETE,
            "viewing_round": None,
        }
    )
