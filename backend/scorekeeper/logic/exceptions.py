"""Typed domain exceptions for the score engine.

All domain-level failures use subclasses of ScoreKeeperError rather than
raw ValueError. The presentation layer catches them at its boundary and
translates them into user-facing messages; the engine only produces a
precise, typed failure reason.
"""


class ScoreKeeperError(Exception):
    """Base exception for score engine failures."""


class InvalidInputError(ScoreKeeperError):
    """Numeric input is outside the scoring domain (negative, above cards dealt, missing entry)."""


class UnsupportedSettingsError(ScoreKeeperError):
    """Game settings contain values the engine cannot honour."""


class StateError(ScoreKeeperError):
    """Raised when an operation is attempted in the wrong progression phase.

    Attributes:
        operation: The engine operation that was attempted (e.g. "advance_round").
        expected: Phase (or phases) the operation is valid in.
        actual: Phase the engine was in when the call was made.

    """

    def __init__(self, *, operation: str, expected: str, actual: str) -> None:
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(f"cannot {operation}: expected {expected}, engine is {actual}")


class NotFoundError(ScoreKeeperError):
    """Raised for a reference to a player id the engine does not know."""

    def __init__(self, *, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"unknown player: {player_id}")
