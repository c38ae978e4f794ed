"""
Simulation engine for the logistics dashboard map.
Owns the simulation state and is the only place it is mutated from outside:
tick(), select_scenario(), approve(), reset().

Two independent drivers act on the engine:
1. A periodic tick: truck motion + environment randomization
2. One-shot scenario timers: scripted narrative steps
"""

import logging
import random
from typing import Any, Dict, List, Optional, Sequence

from config import SimulationSettings, get_settings
from src.data_layer.fleet import DEFAULT_FLEET, TruckProfile
from src.data_layer.locations import get_location
from src.data_layer.route_geometry import Position, RouteRegistry
from src.simulation_layer.environment import EnvironmentModel
from src.simulation_layer.models import ScenarioPhase, SimulationState, TruckState
from src.simulation_layer.motion import MotionModel
from src.simulation_layer.scenario import (
    ScenarioContext,
    ScenarioScript,
    ScriptRunner,
    ScriptStep,
    get_scenario,
)
from src.simulation_layer.scheduler import ManualScheduler, Scheduler

logger = logging.getLogger(__name__)


class SimulationEngine:
    """
    Controller for trucks, environment and the live scenario script.

    Args:
        scheduler: Timer source for scenario steps (virtual clock by default)
        routes: Route registry (built from the default plans by default)
        fleet: Truck profiles restored on every reset
        rng: Random source for environment flips (seeded from settings by default)
        settings: Simulation settings (global settings by default)
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        routes: Optional[RouteRegistry] = None,
        fleet: Optional[Sequence[TruckProfile]] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[SimulationSettings] = None,
    ):
        self.settings = settings or get_settings().simulation
        self.scheduler = scheduler or ManualScheduler()
        self.routes = (
            routes
            if routes is not None
            else RouteRegistry.from_plans(num_points=self.settings.samples_per_route)
        )
        self.fleet: List[TruckProfile] = list(fleet if fleet is not None else DEFAULT_FLEET)

        self.motion = MotionModel(self.routes, self.settings.progress_increment)
        self.environment = EnvironmentModel(
            rng=rng or random.Random(self.settings.random_seed),
            weather_probability=self.settings.weather_change_probability,
            traffic_probability=self.settings.traffic_change_probability,
            thinking_probability=self.settings.thinking_probability,
            thinking_duration=self.settings.thinking_duration_s,
        )

        self.state = SimulationState(trucks=self._initial_trucks())
        self.runner = ScriptRunner(self.scheduler, time_scale=self.settings.script_time_scale)
        self.context = ScenarioContext(
            state=self.state, routes=self.routes, clock=self.scheduler.now
        )
        self._script: Optional[ScenarioScript] = None

    def _start_position(self, profile: TruckProfile) -> Position:
        route = self.routes.find(profile.route_id)
        if route is not None and route.start is not None:
            return route.start
        location = get_location(profile.initial)
        return Position(location["x"], location["y"])

    def _initial_trucks(self) -> List[TruckState]:
        return [
            TruckState.from_profile(profile, self._start_position(profile))
            for profile in self.fleet
        ]

    @property
    def script(self) -> Optional[ScenarioScript]:
        return self._script

    @property
    def is_armed(self) -> bool:
        """True while the live script still has pending timers."""
        return self.runner.armed

    def now(self) -> float:
        return self.scheduler.now()

    ## Periodic driver
    def tick(self) -> None:
        """Advance every truck one step and roll the environment."""
        self.state.tick_count += 1
        self.motion.tick(self.state.trucks)

        force_jam = self._script is not None and self._script.forces_jam(self.context)
        self.environment.tick(self.state, self.now(), force_jam=force_jam)

    ## User triggers
    def select_scenario(self, scenario_id: str) -> None:
        """
        Reset and start the given scenario's script.
        Raises UnknownScenarioError before touching any state.
        """
        script = get_scenario(scenario_id)
        self.reset()

        self._script = script
        self.state.current_scenario = script.scenario_id
        logger.info("Scenario '%s' started", script.scenario_id)
        self.runner.arm(script, self.context)

    def reset(self) -> None:
        """Cancel pending script timers and restore every truck and log to its initial state."""
        self.runner.cancel()
        self._script = None
        self.state.clear_script_output()
        self.state.trucks[:] = self._initial_trucks()
        logger.info("Simulation reset")

    def approve(self) -> bool:
        """
        Apply the live scenario's recommendation.

        Returns:
            False (and changes nothing) when no recommendation is available.
        """
        if self._script is None or not self.state.recommendation_available:
            logger.debug("Approve ignored: no recommendation available")
            return False

        script = self._script
        # Assessment steps that have not fired yet run now, before the mitigation
        self.runner.fast_forward()

        self.state.recommendation_available = False
        script.approve(self.context)
        self.state.phase = ScenarioPhase.RESOLVED
        logger.info("Recommendation approved for '%s'", script.scenario_id)

        self.runner.schedule(
            self.settings.completion_delay_s,
            ScriptStep(self.settings.completion_delay_s, "complete", self._complete),
            label=f"{script.scenario_id}:complete",
        )
        return True

    def _complete(self, ctx: ScenarioContext) -> None:
        if self._script is None:
            return
        self._script.complete(ctx)
        logger.info(
            "Scenario '%s' completed: %s", self._script.scenario_id, self.state.kpis
        )

    ## Read access
    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the state for the dashboard."""
        now = self.now()
        state = self.state
        thinking = self.environment.is_thinking(state, now)
        return {
            "scenario": state.current_scenario,
            "phase": state.phase.value,
            "clock": now,
            "tick": state.tick_count,
            "trucks": [self._truck_view(truck) for truck in state.trucks],
            "environment": {
                "weather": state.environment.weather,
                "traffic": state.environment.traffic,
            },
            "messages": [message.to_dict() for message in state.messages],
            "activities": [activity.to_dict() for activity in state.activities],
            "active_agents": list(state.active_agents),
            "recommendation_available": state.recommendation_available,
            "scenario_completed": state.scenario_completed,
            "kpis": state.kpis.to_dict(),
            "document_issue": state.document_issue,
            "document_fixed": state.document_fixed,
            "agent_thinking": thinking,
            "thinking_message": state.thinking_message if thinking else None,
            "pending_steps": self.runner.pending_steps,
        }

    def truck_snapshot(self, truck_id: str) -> Optional[Dict[str, Any]]:
        """Dashboard view of one truck, or None for an unknown id."""
        truck = self.state.truck(truck_id)
        if truck is None:
            return None
        return self._truck_view(truck)

    def _truck_view(self, truck: TruckState) -> Dict[str, Any]:
        data = truck.to_dict()
        data["checkpoints"] = list(truck.checkpoints)
        route = self.routes.find(truck.route_id)
        data["route_color"] = route.color if route else None
        data["leg"] = None
        if route is not None and truck.current_segment + 1 < len(route.points):
            data["leg"] = {
                "from": route.points[truck.current_segment].name,
                "to": route.points[truck.current_segment + 1].name,
            }
        return data
