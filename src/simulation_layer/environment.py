"""
Weather and traffic randomization.

Each tick rolls the injected random source in a fixed order
(weather, traffic, agent thinking) so a seeded run is reproducible.
"""

import logging
import random
from typing import Optional

from src.simulation_layer.models import (
    TRAFFIC_CONDITIONS,
    WEATHER_CONDITIONS,
    SimulationState,
)

logger = logging.getLogger(__name__)


THINKING_MESSAGES = [
    "Document Intelligence Agent analyzing invoice data...",
    "Searching for matching customs codes in database...",
    "Cross-referencing with previous shipments...",
    "Analyzing document formatting anomalies...",
    "Checking digital signatures...",
]


class EnvironmentModel:
    """
    Low-probability global condition flips.

    Args:
        rng: Random source (seed it for deterministic runs)
        weather_probability: Chance per tick of re-drawing the weather
        traffic_probability: Chance per tick of re-drawing the traffic
        thinking_probability: Chance per tick of showing a thinking message
            while a document issue is open
        thinking_duration: Seconds a thinking message stays visible
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        weather_probability: float = 0.05,
        traffic_probability: float = 0.08,
        thinking_probability: float = 0.10,
        thinking_duration: float = 2.0,
    ):
        self.rng = rng or random.Random()
        self.weather_probability = weather_probability
        self.traffic_probability = traffic_probability
        self.thinking_probability = thinking_probability
        self.thinking_duration = thinking_duration

    def tick(self, state: SimulationState, now: float, force_jam: bool = False) -> None:
        """
        Roll the environment once.

        force_jam: a traffic re-draw lands on "jam" regardless of the roll
        (used while the traffic scenario is building up).
        """
        env = state.environment

        if self.rng.random() < self.weather_probability:
            weather = self.rng.choice(WEATHER_CONDITIONS)
            if weather != env.weather:
                logger.debug("Weather %s -> %s", env.weather, weather)
            env.weather = weather

        if self.rng.random() < self.traffic_probability:
            traffic = self.rng.choice(TRAFFIC_CONDITIONS)
            if force_jam:
                traffic = "jam"
            if traffic != env.traffic:
                logger.debug("Traffic %s -> %s", env.traffic, traffic)
            env.traffic = traffic

        if (
            state.current_scenario == "document-issue"
            and state.document_issue
            and not state.document_fixed
            and self.rng.random() < self.thinking_probability
        ):
            state.thinking_message = self.rng.choice(THINKING_MESSAGES)
            state.thinking_until = now + self.thinking_duration

    @staticmethod
    def is_thinking(state: SimulationState, now: float) -> bool:
        return state.thinking_message is not None and now < state.thinking_until
