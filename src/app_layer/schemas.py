"""
Pydantic models for API request/response.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class PositionModel(BaseModel):
    x: float
    y: float


class LegModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class TruckResponse(BaseModel):
    id: str
    name: str
    initial: str
    destination: str
    checkpoints: List[str]
    route_id: str
    route_color: Optional[str] = None
    status: Literal["on-time", "delayed", "cautious", "rerouted"]
    eta: str
    progress: float
    current_segment: int
    is_affected: bool
    position: PositionModel
    leg: Optional[LegModel] = None


class EnvironmentResponse(BaseModel):
    weather: Literal["sunny", "cloudy", "rainy"]
    traffic: Literal["smooth", "moderate", "jam"]


class AgentMessageResponse(BaseModel):
    agent: str
    message: str
    kind: Literal["info", "warning", "recommendation", "success"]


class AgentActivityResponse(BaseModel):
    id: str
    agent: str
    action: str
    status: Literal["idle", "working", "completed", "waiting"]
    start_time: float
    completion_time: Optional[float] = None


class KpiResponse(BaseModel):
    delays_prevented: int
    time_saved: float
    cost_saved: float
    sla_improvement: float
    active_agents: int


class SimulationStateResponse(BaseModel):
    scenario: Optional[str] = None
    phase: str
    clock: float
    tick: int
    trucks: List[TruckResponse]
    environment: EnvironmentResponse
    messages: List[AgentMessageResponse]
    activities: List[AgentActivityResponse]
    active_agents: List[str]
    recommendation_available: bool
    scenario_completed: bool
    kpis: KpiResponse
    document_issue: bool
    document_fixed: bool
    agent_thinking: bool
    thinking_message: Optional[str] = None
    pending_steps: List[str]


class ScenarioRequest(BaseModel):
    scenario: str


class ScenarioInfo(BaseModel):
    id: str
    title: str
    focus_truck: str


class ApproveResponse(BaseModel):
    approved: bool
    state: SimulationStateResponse


class RoutePointResponse(BaseModel):
    name: str
    x: float
    y: float
    is_checkpoint: bool


class RouteResponse(BaseModel):
    id: str
    color: str
    points: List[RoutePointResponse]
    path_string: str
    samples: List[PositionModel] = []
