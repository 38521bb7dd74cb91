"""
Engine configuration settings.
"""

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Engine settings, overridable through COMBAT_SIM_* environment variables."""

    # Simulation
    MAX_SHOTS: int = 500
    DEFAULT_FIRE_RATE: float = 600.0  # rounds per minute
    DEFAULT_RANGE: float = 60.0  # meters

    # Monte Carlo
    DEFAULT_ITERATIONS: int = 100
    MAX_ITERATIONS: int = 10000

    # Calibration
    CALIBRATION_PASS_ACCURACY: float = 90.0

    # Data
    ITEMS_DATA_DIR: Path = PACKAGE_DATA_DIR / "items"
    CALIBRATION_DATA_DIR: Path = PACKAGE_DATA_DIR / "calibration"

    # Logging
    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="COMBAT_SIM_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for scripts and notebooks using the engine."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
