"""Centralized game settings - all configurable scoring and progression rules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from scorekeeper.logic.exceptions import UnsupportedSettingsError


class GameSettings(BaseModel):
    """
    Configuration for a scored game.

    Defaults match the standard ten-round table: round N deals N cards,
    2-8 players, zero bids worth 10 per card dealt, exact bids 20 per trick,
    missed bids -10 per trick of difference.
    """

    model_config = ConfigDict(frozen=True)

    # --- Game Structure ---
    total_rounds: int = 10
    min_players: int = 2
    max_players: int = 8

    # --- Scoring ---
    zero_bid_multiplier: int = 10
    exact_bid_points_per_trick: int = 20
    missed_bid_penalty_per_trick: int = 10


def validate_settings(settings: GameSettings) -> None:
    """Validate that all settings values are usable by the engine.

    Raises UnsupportedSettingsError listing every offending value.
    """
    errors: list[str] = []

    if settings.total_rounds < 1:
        errors.append(f"total_rounds={settings.total_rounds} must be at least 1")

    if settings.min_players < 1:
        errors.append(f"min_players={settings.min_players} must be at least 1")

    if settings.max_players < settings.min_players:
        errors.append(f"max_players={settings.max_players} is below min_players={settings.min_players}")

    for name in ("zero_bid_multiplier", "exact_bid_points_per_trick", "missed_bid_penalty_per_trick"):
        if getattr(settings, name) < 0:
            errors.append(f"{name}={getattr(settings, name)} must not be negative")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))


def cards_dealt_for_round(round_number: int) -> int:
    """Cards (and therefore hands) dealt in a round: round N deals N."""
    return round_number
