"""Host-side wiring: build a configured, logging-enabled score engine."""

import structlog

from scorekeeper.config import ScoreKeeperSettings
from scorekeeper.logic.engine import ScoreEngine
from shared.logging import rotate_log_file, setup_logging

logger = structlog.get_logger()


def create_engine(
    settings: ScoreKeeperSettings | None = None,
    *,
    game_id: str | None = None,
    configure_logging: bool = True,
) -> ScoreEngine:
    """
    Create a ScoreEngine for one game session.

    Settings default to the SCOREKEEPER_* environment. When configure_logging
    is set, structlog output goes to stdout and, if settings.log_dir is set,
    to ``{log_dir}/{game_id}.log``.
    """
    if settings is None:
        settings = ScoreKeeperSettings()

    engine = ScoreEngine(settings.to_game_settings(), game_id=game_id)

    if configure_logging:
        setup_logging()
        if settings.log_dir is not None:
            rotate_log_file(settings.log_dir, name=engine.game_id)

    logger.info("score engine created", game_id=engine.game_id, total_rounds=settings.total_rounds)
    return engine
