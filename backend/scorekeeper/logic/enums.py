"""
String enum definitions for score engine concepts.
"""

from enum import Enum


class ProgressionPhase(str, Enum):
    """Phase of the round progression state machine."""

    AWAITING_SUBMISSIONS = "awaiting_submissions"
    ROUND_COMPLETE = "round_complete"
    GAME_COMPLETE = "game_complete"


class ScoringOutcome(str, Enum):
    """Which branch of the scoring table a player's round fell into."""

    ZERO_BID_SUCCESS = "zero_bid_success"
    ZERO_BID_FAILURE = "zero_bid_failure"
    EXACT_BID = "exact_bid"
    MISSED_BID = "missed_bid"


class BonusStatus(str, Enum):
    """What happened to a declared bonus."""

    APPLIED = "applied"
    IGNORED = "ignored"  # declared, but the bid was missed
    NONE = "none"  # nothing declared
