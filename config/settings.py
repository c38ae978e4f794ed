"""
Centralized configuration using pydantic-settings.
Loads from .env file and provides typed access to all constants.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


ScenarioId = Literal["supplier-delay", "traffic-jam", "document-issue"]


class SimulationSettings(BaseSettings):
    """Simulation engine parameters."""

    tick_interval_s: float = Field(default=0.15, gt=0, description="Seconds between motion ticks")
    progress_increment: float = Field(
        default=0.5, gt=0, le=100, description="Segment progress (0~100) added per tick"
    )
    samples_per_route: int = Field(default=100, ge=1, description="Curve samples per route")

    weather_change_probability: float = Field(default=0.05, ge=0, le=1)
    traffic_change_probability: float = Field(default=0.08, ge=0, le=1)
    thinking_probability: float = Field(default=0.10, ge=0, le=1)
    thinking_duration_s: float = Field(default=2.0, ge=0)

    completion_delay_s: float = Field(
        default=10.0, ge=0, description="Delay between approval and scenario completion"
    )
    script_time_scale: float = Field(
        default=1.0, gt=0, description="Multiplier applied to every scripted delay"
    )
    random_seed: Optional[int] = Field(default=None, description="Seed for environment randomization")
    auto_tick: bool = Field(default=True, description="Run the periodic tick inside the API process")
    default_scenario: Optional[ScenarioId] = None

    model_config = {"env_prefix": "SIM_", "env_file": ".env", "extra": "ignore"}


class PathSettings(BaseSettings):
    """File path configuration."""

    project_root: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent
    )
    export_dir: Optional[Path] = Field(
        default=None,
        description="CSV export directory (overrides data/output when set)"
    )

    model_config = {"env_prefix": "PATH_", "env_file": ".env", "extra": "ignore"}

    @property
    def output_dir(self) -> Path:
        if self.export_dir is not None:
            return self.export_dir
        return self.project_root / "data" / "output"


class Settings(BaseSettings):
    """Root settings aggregator."""

    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    paths: PathSettings = Field(default_factory=PathSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
