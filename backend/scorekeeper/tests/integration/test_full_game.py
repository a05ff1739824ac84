"""
Integration tests: whole games played through the ScoreEngine facade.
"""

import pytest

from scorekeeper.logic.engine import ScoreEngine
from scorekeeper.logic.enums import ProgressionPhase
from scorekeeper.logic.exceptions import StateError
from scorekeeper.logic.types import Player
from scorekeeper.tests.conftest import FIXED_TIME, entries


def _summary_rows(standings):
    return [(s.player_id, s.total_score, s.rank) for s in standings]


class TestTwoRoundGame:
    @pytest.fixture
    def engine(self):
        eng = ScoreEngine(game_id="two-rounds", clock=lambda: FIXED_TIME)
        eng.initialize(
            [Player(id="A", name="Alice"), Player(id="B", name="Bruno"), Player(id="C", name="Chen")],
            total_rounds=2,
        )
        return eng

    def test_plays_to_completion(self, engine):
        after_first = engine.submit_round(entries(A=(1, 1), B=(0, 0), C=(0, 1)))
        assert _summary_rows(after_first) == [("A", 20, 1), ("B", 10, 2), ("C", -10, 3)]

        assert engine.advance_round() == 2
        assert engine.get_view().cards_dealt == 2

        after_second = engine.submit_round(entries(A=(1, 0), B=(2, 2), C=(0, 0)))
        assert _summary_rows(after_second) == [("B", 50, 1), ("A", 10, 2), ("C", 10, 2)]

        assert engine.advance_round() is None
        view = engine.get_view()
        assert view.game_ended is True
        assert view.phase == ProgressionPhase.GAME_COMPLETE
        assert [s.player_id for s in engine.get_leaders()] == ["B"]

    def test_history_and_summary_after_game(self, engine):
        engine.submit_round(entries(A=(1, 1), B=(0, 0), C=(0, 1)))
        engine.advance_round()
        engine.submit_round(entries(A=(1, 0), B=(2, 2), C=(0, 0)))
        engine.advance_round()

        history = engine.get_round_history()
        assert [(r.round_number, r.cards_dealt) for r in history] == [(1, 1), (2, 2)]
        assert [r.total_delta for r in history[1].results] == [-10, 40, 20]

        summary = engine.get_summary()
        assert summary.rounds_played == 2
        assert [s.player_id for s in summary.leaders] == ["B"]

        rankings = engine.get_final_rankings()
        assert [r.player_id for r in rankings if r.is_final_winner] == ["B"]

        assert engine.get_player_history("C").round_scores == (-10, 20)

    def test_finished_game_rejects_more_rounds(self, engine):
        for round_entries in (
            entries(A=(0, 0), B=(0, 0), C=(0, 0)),
            entries(A=(0, 0), B=(0, 0), C=(0, 0)),
        ):
            engine.submit_round(round_entries)
            engine.advance_round()

        with pytest.raises(StateError, match="game_complete"):
            engine.submit_round(entries(A=(0, 0), B=(0, 0), C=(0, 0)))
        assert len(engine.get_round_history()) == 2


class TestFullLengthGame:
    def test_ten_rounds_of_exact_bids(self):
        engine = ScoreEngine(clock=lambda: FIXED_TIME)
        engine.initialize(["north", "east", "south", "west"])

        rounds_seen = []
        next_round = 1
        while next_round is not None:
            cards = engine.get_view().cards_dealt
            rounds_seen.append(cards)
            # north always bids and takes every trick, the rest bid zero and take none
            engine.submit_round(
                {
                    "north": {"bid": cards, "tricks_taken": cards},
                    "east": {"bid": 0, "tricks_taken": 0},
                    "south": {"bid": 0, "tricks_taken": 0},
                    "west": {"bid": 0, "tricks_taken": 0, "bonus_declared": 1},
                }
            )
            next_round = engine.advance_round()

        assert rounds_seen == list(range(1, 11))
        standings = engine.get_standings()
        # north: 20 * (1 + ... + 10); zero bids: 10 * (1 + ... + 10)
        assert _summary_rows(standings) == [
            ("north", 1100, 1),
            ("west", 560, 2),
            ("east", 550, 3),
            ("south", 550, 3),
        ]
        assert engine.get_score_breakdown("west").rounds_with_bonus == 10

    def test_early_end_then_review(self):
        engine = ScoreEngine()
        engine.initialize(["a", "b"], total_rounds=5)
        engine.submit_round(entries(a=(1, 1), b=(1, 0)))
        engine.advance_round()
        engine.go_to_round(1)

        rankings = engine.end_game()

        assert [(r.player_id, r.is_final_winner) for r in rankings] == [("a", True), ("b", False)]
        assert engine.get_view().viewing_round is None
        assert engine.get_summary().rounds_played == 1
