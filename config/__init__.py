from config.settings import (
    PathSettings,
    ScenarioId,
    Settings,
    SimulationSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "PathSettings",
    "ScenarioId",
    "Settings",
    "SimulationSettings",
    "get_settings",
    "reset_settings",
]
