"""Host configuration via environment variables."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from scorekeeper.logic.settings import GameSettings


class ScoreKeeperSettings(BaseSettings):
    model_config = {"env_prefix": "SCOREKEEPER_"}

    total_rounds: int = Field(default=10, ge=1)
    min_players: int = Field(default=2, ge=1)
    max_players: int = Field(default=8, ge=1)
    log_dir: str | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def validate_player_bounds(self) -> "ScoreKeeperSettings":
        if self.max_players < self.min_players:
            raise ValueError(f"max_players ({self.max_players}) must be >= min_players ({self.min_players})")
        return self

    def to_game_settings(self) -> GameSettings:
        """Build the engine's game rules from the host configuration."""
        return GameSettings(
            total_rounds=self.total_rounds,
            min_players=self.min_players,
            max_players=self.max_players,
        )
