"""
Score engine facade.

Composes scoring, round progression and standings behind one object per
game session. The engine holds a single frozen GameState and swaps it for
the new state only after a transition succeeds, so every rejected call
leaves the game exactly as it was.

Instances are not thread-safe: the host owns one engine per session and
serializes calls to it.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from scorekeeper.logic import progression
from scorekeeper.logic.enums import ProgressionPhase
from scorekeeper.logic.exceptions import InvalidInputError, NotFoundError, StateError
from scorekeeper.logic.scoring import score_submission
from scorekeeper.logic.standings import (
    compute_standings,
    final_rankings,
    leaders,
    player_history,
    score_breakdown,
)
from scorekeeper.logic.types import GameSummary, GameView, Player, PlayerSubmission

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from scorekeeper.logic.settings import GameSettings
    from scorekeeper.logic.state import GameState, RoundState
    from scorekeeper.logic.types import (
        FinalStanding,
        PlayerHistory,
        PlayerStanding,
        RoundProgress,
        RoundRecord,
        ScoreBreakdown,
    )

logger = structlog.get_logger()

SubmissionEntry = PlayerSubmission | Mapping[str, Any]


def _coerce_player(player: Player | Mapping[str, Any] | str) -> Player:
    if isinstance(player, Player):
        return player
    if isinstance(player, str):
        # bare names: the name doubles as the id
        return Player(id=player, name=player)
    return Player.model_validate(player)


class ScoreEngine:
    """
    Round/score engine for one game session.

    Typical flow::

        engine = ScoreEngine()
        engine.initialize([Player(id="a", name="Ann"), Player(id="b", name="Bo")])
        engine.submit_round({"a": {"bid": 1, "tricks_taken": 1}, "b": {"bid": 0, "tricks_taken": 0}})
        engine.advance_round()
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        *,
        game_id: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self.game_id = game_id or uuid.uuid4().hex
        self._log = logger.bind(game_id=self.game_id)
        self._state: GameState | None = None

    # --- state access ---

    def _now(self) -> datetime | None:
        return self._clock() if self._clock is not None else None

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise StateError(operation="read state", expected="initialized game", actual="uninitialized")
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    # --- commands ---

    def initialize(
        self,
        players: Sequence[Player | Mapping[str, Any] | str],
        total_rounds: int | None = None,
    ) -> GameView:
        """
        Reset all state and seat the given players.

        Raises InvalidInputError for a player count outside the configured
        bounds, duplicate player ids, or fewer than one round.
        """
        try:
            seated = [_coerce_player(p) for p in players]
        except ValidationError as e:
            raise InvalidInputError(f"invalid player: {e}") from e

        self._state = progression.init_game(seated, self._settings, total_rounds, started_at=self._now())
        self._log.info(
            "game initialized",
            players=list(self._state.player_ids),
            total_rounds=self._state.total_rounds,
        )
        return self.get_view()

    def submit_round(self, entries: Mapping[str, SubmissionEntry]) -> list[PlayerStanding]:
        """
        Score the current round from per-player bids, tricks and bonuses.

        entries maps player id to a PlayerSubmission or a mapping with
        ``bid``, ``tricks_taken`` and optional ``bonus_declared``. Every entry
        is validated and scored before any state changes. Returns the
        updated standings.
        """
        state = self.state
        progression.require_phase(state, "submit_round", ProgressionPhase.AWAITING_SUBMISSIONS)

        if not isinstance(entries, Mapping):
            raise InvalidInputError(f"round entries must map player id to entry, got {type(entries).__name__}")

        for player_id in entries:
            if state.find_player(player_id) is None:
                self._log.warning("submission for unknown player", player_id=player_id)
                raise NotFoundError(player_id=player_id)

        missing = [pid for pid in state.player_ids if pid not in entries]
        if missing:
            raise InvalidInputError(f"missing entries for: {', '.join(missing)}")

        cards_dealt = state.cards_dealt
        results = [
            score_submission(player_id, self._parse_entry(player_id, entry), cards_dealt, state.settings)
            for player_id, entry in entries.items()
        ]

        self._state = progression.submit_round(state, results, self._now())
        standings = self.get_standings()
        self._log.info(
            "round submitted",
            round_number=state.current_round,
            cards_dealt=cards_dealt,
            deltas={r.player_id: r.total_delta for r in results},
        )
        return standings

    def _parse_entry(self, player_id: str, entry: SubmissionEntry) -> PlayerSubmission:
        if isinstance(entry, PlayerSubmission):
            return entry
        try:
            return PlayerSubmission.model_validate(entry)
        except ValidationError as e:
            self._log.warning("invalid round entry", player_id=player_id, errors=e.error_count())
            raise InvalidInputError(f"invalid entry for {player_id}: {e}") from e

    def advance_round(self) -> int | None:
        """
        Move past a completed round.

        Returns the new round number, or None when that was the last round
        and the game is now complete.
        """
        self._state = progression.advance(self.state, self._now())
        if self._state.game_ended:
            self._log.info("game complete", rounds_played=len(self._state.rounds))
            return None
        self._log.info("round advanced", round_number=self._state.current_round)
        return self._state.current_round

    def can_advance(self) -> bool:
        return progression.can_advance(self.state)

    def go_to_round(self, target: int) -> GameView:
        """Review an earlier round. Never re-opens it for editing."""
        self._state = progression.go_to_round(self.state, target)
        self._log.debug("reviewing round", viewing_round=target)
        return self.get_view()

    def return_to_current_round(self) -> GameView:
        self._state = progression.return_to_current(self.state)
        return self.get_view()

    def end_game(self) -> list[FinalStanding]:
        """Finish the game now. Idempotent; returns the final rankings."""
        state = self.state
        if not state.game_ended:
            self._state = progression.end_game(state)
            self._log.info("game ended", rounds_played=len(state.rounds))
        return self.get_final_rankings()

    # --- queries ---

    def get_standings(self) -> list[PlayerStanding]:
        state = self.state
        return compute_standings(state.rounds, state.players)

    def get_leaders(self) -> list[PlayerStanding]:
        return leaders(self.get_standings())

    def get_final_rankings(self) -> list[FinalStanding]:
        return final_rankings(self.get_standings())

    def get_round_history(self) -> tuple[RoundRecord, ...]:
        # records are frozen, so handing out the tuple cannot leak mutation
        return self.state.rounds

    def get_round_state(self) -> RoundState:
        return self.state.round_state

    def get_round_progress(self) -> RoundProgress:
        return progression.round_progress(self.state)

    def get_round_record(self, round_number: int) -> RoundRecord | None:
        return next((r for r in self.state.rounds if r.round_number == round_number), None)

    def get_player_history(self, player_id: str) -> PlayerHistory:
        state = self.state
        return player_history(state.rounds, state.players, player_id)

    def get_score_breakdown(self, player_id: str) -> ScoreBreakdown:
        state = self.state
        if state.find_player(player_id) is None:
            raise NotFoundError(player_id=player_id)
        return score_breakdown(state.rounds, player_id)

    def get_view(self) -> GameView:
        state = self.state
        return GameView(
            current_round=state.current_round,
            total_rounds=state.total_rounds,
            cards_dealt=state.cards_dealt,
            phase=state.phase,
            viewing_round=state.viewing_round,
            game_ended=state.game_ended,
            standings=tuple(self.get_standings()),
            round_history=state.rounds,
        )

    def get_summary(self) -> GameSummary:
        state = self.state
        standings = self.get_standings()
        return GameSummary(
            rounds_played=len(state.rounds),
            game_ended=state.game_ended,
            standings=tuple(standings),
            round_history=state.rounds,
            leaders=tuple(leaders(standings)),
        )
