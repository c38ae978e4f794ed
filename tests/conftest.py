"""Pytest configuration and shared fixtures."""

from typing import List, Sequence

import pytest

from config import SimulationSettings
from src.data_layer.route_geometry import RouteRegistry
from src.simulation_layer.engine import SimulationEngine
from src.simulation_layer.scheduler import ManualScheduler


class ScriptedRandom:
    """
    Stand-in random source with a fixed sequence of random() values.
    choice() picks by index from a second sequence (default: first element).
    """

    def __init__(self, values: Sequence[float], picks: Sequence[int] = ()):
        self._values: List[float] = list(values)
        self._picks: List[int] = list(picks)

    def random(self) -> float:
        if not self._values:
            return 0.999
        return self._values.pop(0)

    def choice(self, seq):
        index = self._picks.pop(0) if self._picks else 0
        return seq[index]


@pytest.fixture
def sim_settings() -> SimulationSettings:
    """Deterministic settings: no random environment flips, no autostart."""
    return SimulationSettings(
        tick_interval_s=0.15,
        progress_increment=0.5,
        samples_per_route=100,
        weather_change_probability=0.0,
        traffic_change_probability=0.0,
        thinking_probability=0.0,
        completion_delay_s=10.0,
        script_time_scale=1.0,
        random_seed=7,
        auto_tick=False,
        default_scenario=None,
    )


@pytest.fixture(scope="session")
def routes() -> RouteRegistry:
    return RouteRegistry.from_plans(num_points=100)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def engine(scheduler, sim_settings) -> SimulationEngine:
    return SimulationEngine(scheduler=scheduler, settings=sim_settings)


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom: scripted_random([0.01, 0.9], picks=[2])."""
    return ScriptedRandom
