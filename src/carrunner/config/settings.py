"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested groups use a double underscore, e.g. ``CARRUNNER_DISPLAY__WIDTH``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DisplaySettings(BaseSettings):
    """Viewport and rendering settings."""

    width: int = Field(default=1200, gt=0)
    height: int = Field(default=600, gt=0)

    # Rendering
    fps: int = Field(default=60, gt=0)


class SimulatorSettings(BaseSettings):
    """Desktop window host settings."""

    title: str = "Car Runner"
    fullscreen: bool = False

    # Fixed simulation rate, independent of the display refresh
    step_rate: int = Field(default=60, gt=0)
    max_steps_per_frame: int = Field(default=5, ge=1)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CARRUNNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    variant: Literal["classic", "rally", "transformer"] = "transformer"
    seed: int | None = None
    debug: bool = False

    # Paths
    high_score_path: Path = Field(
        default_factory=lambda: Path.home() / ".carrunner" / "high_score.json"
    )
    log_path: Path | None = None

    # Nested settings
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)

    @property
    def step_seconds(self) -> float:
        """Duration of one simulation frame."""
        return 1.0 / self.simulator.step_rate


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
