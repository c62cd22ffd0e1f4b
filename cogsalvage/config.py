"""
Battle configuration settings.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Battle settings (override with COGSALVAGE_* environment variables)."""

    # Board
    HEX_SIZE: float = Field(default=36.0, gt=0)
    GRID_RADIUS: int = Field(default=5, gt=0)
    ORIGIN_X: float = 450.0  # 900x700 viewport center
    ORIGIN_Y: float = 350.0

    # Player robot
    PLAYER_HP: int = Field(default=10, gt=0)
    PLAYER_AP: int = Field(default=3, ge=1)
    PLAYER_DAMAGE: int = 2
    PLAYER_RANGE: int = 1

    # Hazards
    TRAP_DAMAGE: int = 1

    # Spawning
    ENEMY_COUNT: int = 3
    MIN_SPAWN_DISTANCE: int = 3
    RANDOM_SEED: int | None = None

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="COGSALVAGE_")


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for the package.

    Library modules only create loggers. Call this once from the entry
    point that hosts a Battle (a game loop or a script) before
    Battle.create; it falls back to settings.LOG_LEVEL.
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
