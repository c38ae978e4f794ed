"""
Simulation API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from src.app_layer.dependencies import get_engine
from src.app_layer.schemas import (
    ApproveResponse,
    ScenarioInfo,
    ScenarioRequest,
    SimulationStateResponse,
    TruckResponse,
)
from src.simulation_layer.engine import SimulationEngine
from src.simulation_layer.scenario import SCENARIOS, UnknownScenarioError

router = APIRouter()


@router.get("/state", response_model=SimulationStateResponse)
async def get_state(engine: SimulationEngine = Depends(get_engine)):
    """Current trucks, environment, agent log and scenario flags."""
    return engine.snapshot()


@router.get("/scenarios", response_model=List[ScenarioInfo])
async def list_scenarios():
    return [
        ScenarioInfo(id=scenario_id, title=script.title, focus_truck=script.focus_truck)
        for scenario_id, script in SCENARIOS.items()
    ]


@router.post("/scenario", response_model=SimulationStateResponse)
async def select_scenario(
    request: ScenarioRequest, engine: SimulationEngine = Depends(get_engine)
):
    """Reset and start a scenario script."""
    try:
        engine.select_scenario(request.scenario)
    except UnknownScenarioError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return engine.snapshot()


@router.post("/reset", response_model=SimulationStateResponse)
async def reset_simulation(engine: SimulationEngine = Depends(get_engine)):
    engine.reset()
    return engine.snapshot()


@router.post("/approve", response_model=ApproveResponse)
async def approve_recommendation(engine: SimulationEngine = Depends(get_engine)):
    """Approve the live recommendation. approved=false when none is available."""
    approved = engine.approve()
    return {"approved": approved, "state": engine.snapshot()}


@router.post("/tick", response_model=SimulationStateResponse)
async def tick_simulation(
    count: int = Query(default=1, ge=1, le=1000),
    engine: SimulationEngine = Depends(get_engine),
):
    """Advance the motion model manually."""
    for _ in range(count):
        engine.tick()
    return engine.snapshot()


@router.get("/trucks/{truck_id}", response_model=TruckResponse)
async def get_truck(truck_id: str, engine: SimulationEngine = Depends(get_engine)):
    truck = engine.truck_snapshot(truck_id)
    if truck is None:
        raise HTTPException(status_code=404, detail=f"Unknown truck: {truck_id}")
    return truck
