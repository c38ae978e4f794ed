"""
Scenario script building blocks.

A script is a list of (offset, mutation) steps armed together when the
scenario is selected, plus the approve/complete handlers the dashboard
triggers later. Steps with a zero offset run synchronously on selection.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List, Optional

from src.data_layer.route_geometry import RouteRegistry
from src.simulation_layer.models import (
    KpiSummary,
    ScenarioPhase,
    SimulationState,
    TruckState,
)
from src.simulation_layer.motion import place_truck
from src.simulation_layer.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class UnknownScenarioError(ValueError):
    """Raised when a scenario id has no registered script."""


@dataclass
class ScenarioContext:
    """What a script step may touch: the state, the routes and the clock."""

    state: SimulationState
    routes: RouteRegistry
    clock: Callable[[], float]

    def now(self) -> float:
        return self.clock()

    def truck(self, truck_id: str) -> Optional[TruckState]:
        return self.state.truck(truck_id)

    def update_truck(self, truck_id: str, **changes) -> None:
        """Set status/eta/is_affected/name on a truck. Position is not accepted."""
        if "position" in changes:
            raise ValueError("position is derived from route progress; use move_truck()")
        truck = self.truck(truck_id)
        if truck is None:
            logger.warning("Scenario references unknown truck %s", truck_id)
            return
        for key, value in changes.items():
            setattr(truck, key, value)

    def move_truck(self, truck_id: str, segment: int, progress: float) -> None:
        truck = self.truck(truck_id)
        if truck is None:
            return
        place_truck(truck, self.routes.find(truck.route_id), segment, progress)


@dataclass(frozen=True)
class ScriptStep:
    """One timed mutation. `at` is seconds after the scenario was selected."""

    at: float
    name: str
    action: Callable[[ScenarioContext], None]
    phase: Optional[ScenarioPhase] = None


class ScenarioScript(ABC):
    """Base class for the scripted disruption narratives."""

    scenario_id: str = ""
    title: str = ""
    focus_truck: str = ""
    kpis: KpiSummary = KpiSummary()

    @abstractmethod
    def steps(self) -> List[ScriptStep]:
        """Timed steps, in firing order."""
        ...

    @abstractmethod
    def approve(self, ctx: ScenarioContext) -> None:
        """Apply the recommended mitigation."""
        ...

    def complete(self, ctx: ScenarioContext) -> None:
        """Close the scenario and publish its KPI figures."""
        ctx.state.scenario_completed = True
        ctx.state.phase = ScenarioPhase.COMPLETED
        ctx.state.kpis = self.kpis

    def forces_jam(self, ctx: ScenarioContext) -> bool:
        """Whether a random traffic re-draw must land on "jam" right now."""
        return False


class ScriptRunner:
    """
    Arms a script's steps on a scheduler and keeps their handles.

    Only one script is armed at a time: arm() cancels whatever the previous
    script still had pending before scheduling anything new.
    """

    def __init__(self, scheduler: Scheduler, time_scale: float = 1.0):
        self.scheduler = scheduler
        self.time_scale = time_scale
        self._pending: Dict[int, ScriptStep] = {}
        self._handles: Dict[int, TimerHandle] = {}
        self._context: Optional[ScenarioContext] = None

    @property
    def armed(self) -> bool:
        return bool(self._handles)

    @property
    def pending_steps(self) -> List[str]:
        return [self._pending[seq].name for seq in sorted(self._pending)]

    def arm(self, script: ScenarioScript, ctx: ScenarioContext) -> None:
        self.cancel()
        self._context = ctx
        for step in script.steps():
            if step.at <= 0:
                self._run(step, ctx)
            else:
                self.schedule(step.at, step, label=f"{script.scenario_id}:{step.name}")

    def schedule(self, delay: float, step: ScriptStep, label: str = "") -> TimerHandle:
        """Arm a single step `delay` (unscaled) seconds from now."""
        if self._context is None:
            raise RuntimeError("No script armed")
        ctx = self._context
        handle = self.scheduler.call_later(
            delay * self.time_scale, partial(self._fire, step, ctx), label=label or step.name
        )
        self._handles[handle.seq] = handle
        self._pending[handle.seq] = step
        return handle

    def cancel(self) -> int:
        """Cancel every pending step of the current script."""
        count = len(self._handles)
        for handle in list(self._handles.values()):
            self.scheduler.cancel(handle)
        self._handles.clear()
        self._pending.clear()
        self._context = None
        if count:
            logger.info("Cancelled %d pending scenario step(s)", count)
        return count

    def fast_forward(self, until: Optional[Callable[[ScriptStep], bool]] = None) -> int:
        """
        Run pending steps immediately, in firing order.

        until: stop before the first step for which it returns True.
        """
        ran = 0
        for seq in sorted(self._pending, key=lambda s: self._handles[s].due):
            step = self._pending[seq]
            if until is not None and until(step):
                break
            handle = self._handles.pop(seq)
            self._pending.pop(seq)
            self.scheduler.cancel(handle)
            self._run(step, self._context)
            ran += 1
        return ran

    def _fire(self, step: ScriptStep, ctx: ScenarioContext) -> None:
        for seq, pending in list(self._pending.items()):
            if pending is step:
                self._pending.pop(seq)
                self._handles.pop(seq, None)
        self._run(step, ctx)

    @staticmethod
    def _run(step: ScriptStep, ctx: ScenarioContext) -> None:
        step.action(ctx)
        if step.phase is not None:
            ctx.state.phase = step.phase
        logger.info("Scenario step '%s' applied", step.name)
