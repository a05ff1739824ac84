"""
Standings: per-player totals and dense ranking derived from round history.

Nothing here is stored. Every function recomputes from the RoundRecord
sequence, so standings can never drift from the history they summarize.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorekeeper.logic.enums import BonusStatus
from scorekeeper.logic.exceptions import NotFoundError
from scorekeeper.logic.types import FinalStanding, PlayerHistory, PlayerStanding, ScoreBreakdown

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorekeeper.logic.types import Player, Points, RoundRecord

# fractional bonuses are summed in binary floating point; totals are rounded
# to this many places so that 0.1 + 0.2 ties with 0.3
TOTAL_PRECISION = 9


def normalize_total(total: Points) -> Points:
    return round(total, TOTAL_PRECISION) if isinstance(total, float) else total


def assign_dense_ranks(totals: Sequence[Points]) -> list[int]:
    """
    Rank totals that are already sorted in descending order.

    Equal totals share a rank; the next distinct total's rank is the previous
    rank plus the number of players that shared it, e.g. [30, 30, 10] -> [1, 1, 3].
    """
    ranks: list[int] = []
    rank = 1
    seen_at_rank = 0
    previous: Points | None = None
    for total in totals:
        if previous is not None and total < previous:
            rank += seen_at_rank
            seen_at_rank = 0
        seen_at_rank += 1
        ranks.append(rank)
        previous = total
    return ranks


def compute_standings(rounds: Sequence[RoundRecord], players: Sequence[Player]) -> list[PlayerStanding]:
    """
    Sum each player's deltas across all rounds and rank them.

    Sorted by total descending; ties keep player insertion order. Players
    missing from a round contribute 0 for it.
    """
    round_scores = {p.id: tuple(record.delta_for(p.id) for record in rounds) for p in players}
    totals = {pid: normalize_total(sum(scores)) for pid, scores in round_scores.items()}

    # sorted() is stable, so equal totals keep seating order
    ordered = sorted(players, key=lambda p: -totals[p.id])
    ranks = assign_dense_ranks([totals[p.id] for p in ordered])

    return [
        PlayerStanding(
            player_id=player.id,
            name=player.name,
            total_score=totals[player.id],
            rank=rank,
            round_scores=round_scores[player.id],
            is_leader=rank == 1,
        )
        for player, rank in zip(ordered, ranks, strict=True)
    ]


def leaders(standings: Sequence[PlayerStanding]) -> list[PlayerStanding]:
    """All players sharing rank 1."""
    return [s for s in standings if s.rank == 1]


def final_rankings(standings: Sequence[PlayerStanding]) -> list[FinalStanding]:
    return [FinalStanding(**s.model_dump(), is_final_winner=s.rank == 1) for s in standings]


def player_history(
    rounds: Sequence[RoundRecord],
    players: Sequence[Player],
    player_id: str,
) -> PlayerHistory:
    """
    Return one player's round-by-round scores, rank and average.

    Raises NotFoundError when the player is not in the game.
    """
    standing = next((s for s in compute_standings(rounds, players) if s.player_id == player_id), None)
    if standing is None:
        raise NotFoundError(player_id=player_id)

    played = len(standing.round_scores)
    return PlayerHistory(
        player_id=standing.player_id,
        name=standing.name,
        total_score=standing.total_score,
        rank=standing.rank,
        round_scores=standing.round_scores,
        average_score=standing.total_score / played if played else 0.0,
    )


def score_breakdown(rounds: Sequence[RoundRecord], player_id: str) -> ScoreBreakdown:
    """Split a player's total into base score and applied bonus."""
    results = [r for r in (record.result_for(player_id) for record in rounds) if r is not None]
    total_base = sum(r.base_score for r in results)
    total_bonus = normalize_total(sum(r.bonus_applied for r in results))
    return ScoreBreakdown(
        player_id=player_id,
        total_base_score=total_base,
        total_bonus_applied=total_bonus,
        total_score=normalize_total(total_base + total_bonus),
        rounds_with_bonus=sum(1 for r in results if r.bonus_status == BonusStatus.APPLIED),
        rounds_played=len(results),
    )
