"""
Shared data models for the simulation layer.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from config import ScenarioId
from src.data_layer.fleet import TruckProfile
from src.data_layer.route_geometry import Position


WeatherCondition = Literal["sunny", "cloudy", "rainy"]
TrafficCondition = Literal["smooth", "moderate", "jam"]
TruckStatus = Literal["on-time", "delayed", "cautious", "rerouted"]
ActivityStatus = Literal["idle", "working", "completed", "waiting"]
MessageKind = Literal["info", "warning", "recommendation", "success"]

WEATHER_CONDITIONS: Tuple[str, ...] = ("sunny", "cloudy", "rainy")
TRAFFIC_CONDITIONS: Tuple[str, ...] = ("smooth", "moderate", "jam")


class ScenarioPhase(str, Enum):
    """Progress of the live scenario script."""

    IDLE = "idle"
    AGENTS_ANNOUNCED = "agents-announced"
    EVENT_DETECTED = "event-detected"
    IMPACT_ASSESSED = "impact-assessed"
    RESOLVED = "resolved"
    COMPLETED = "completed"


@dataclass
class TruckState:
    """
    Mutable state of a tracked truck.

    position is derived from (route, current_segment, progress) by the motion
    model; nothing else writes it except a reset to the route start.
    """
    id: str
    name: str
    initial: str
    destination: str
    route_id: str
    eta: str
    position: Position
    checkpoints: Tuple[str, ...] = ()
    status: TruckStatus = "on-time"
    progress: float = 0.0     # 0~100 within the current segment
    current_segment: int = 0
    is_affected: bool = False

    @classmethod
    def from_profile(cls, profile: TruckProfile, start: Position) -> "TruckState":
        return cls(
            id=profile.id,
            name=profile.name,
            initial=profile.initial,
            destination=profile.destination,
            route_id=profile.route_id,
            eta=profile.eta,
            position=start,
            checkpoints=profile.checkpoints,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AgentMessage:
    """An append-only agent log line."""
    agent: str
    message: str
    kind: MessageKind

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AgentActivity:
    """A simulated agent task; updated in place by id."""
    id: str
    agent: str
    action: str
    status: ActivityStatus
    start_time: float
    completion_time: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KpiSummary:
    """Outcome figures shown once a scenario completes."""
    delays_prevented: int = 0
    time_saved: float = 0.0      # hours
    cost_saved: float = 0.0      # USD
    sla_improvement: float = 0.0  # percentage points
    active_agents: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EnvironmentState:
    weather: WeatherCondition = "sunny"
    traffic: TrafficCondition = "smooth"


@dataclass
class SimulationState:
    """
    Everything the dashboard reads.
    Owned by the engine; scenario scripts mutate it through the helpers below.
    """
    trucks: List[TruckState] = field(default_factory=list)
    environment: EnvironmentState = field(default_factory=EnvironmentState)
    messages: List[AgentMessage] = field(default_factory=list)
    activities: List[AgentActivity] = field(default_factory=list)
    active_agents: List[str] = field(default_factory=list)

    current_scenario: Optional[ScenarioId] = None
    phase: ScenarioPhase = ScenarioPhase.IDLE
    recommendation_available: bool = False
    scenario_completed: bool = False
    kpis: KpiSummary = field(default_factory=KpiSummary)

    document_issue: bool = False
    document_fixed: bool = False
    thinking_message: Optional[str] = None
    thinking_until: float = 0.0

    tick_count: int = 0

    def truck(self, truck_id: str) -> Optional[TruckState]:
        for truck in self.trucks:
            if truck.id == truck_id:
                return truck
        return None

    def activity(self, activity_id: str) -> Optional[AgentActivity]:
        for activity in self.activities:
            if activity.id == activity_id:
                return activity
        return None

    def start_activity(self, activity_id: str, agent: str, action: str, now: float) -> AgentActivity:
        """Append a working activity and mark its agent as engaged."""
        activity = AgentActivity(
            id=activity_id, agent=agent, action=action, status="working", start_time=now
        )
        self.activities.append(activity)
        self.active_agents.append(agent)
        return activity

    def complete_activity(self, activity_id: str, action: str, now: float) -> bool:
        activity = self.activity(activity_id)
        if activity is None:
            return False
        activity.action = action
        activity.status = "completed"
        activity.completion_time = now
        return True

    def post(self, agent: str, message: str, kind: str) -> AgentMessage:
        entry = AgentMessage(agent=agent, message=message, kind=kind)
        self.messages.append(entry)
        return entry

    def clear_script_output(self) -> None:
        """Drop every trace of a previous scenario (trucks are handled separately)."""
        self.messages.clear()
        self.activities.clear()
        self.active_agents.clear()
        self.current_scenario = None
        self.phase = ScenarioPhase.IDLE
        self.recommendation_available = False
        self.scenario_completed = False
        self.kpis = KpiSummary()
        self.document_issue = False
        self.document_fixed = False
        self.thinking_message = None
        self.thinking_until = 0.0
