"""
FastAPI dependency injection providers.
"""

from functools import lru_cache
from typing import Optional

from config import Settings, get_settings
from src.simulation_layer.engine import SimulationEngine
from src.simulation_layer.scheduler import AsyncioScheduler


@lru_cache
def get_cached_settings() -> Settings:
    return get_settings()


_engine: Optional[SimulationEngine] = None


def get_engine() -> SimulationEngine:
    """The process-wide engine, driven by the event loop's timers."""
    global _engine
    if _engine is None:
        _engine = SimulationEngine(
            scheduler=AsyncioScheduler(),
            settings=get_cached_settings().simulation,
        )
    return _engine

