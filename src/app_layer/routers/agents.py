"""
Agent activity and message log endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends

from src.app_layer.dependencies import get_engine
from src.app_layer.schemas import AgentActivityResponse, AgentMessageResponse
from src.simulation_layer.engine import SimulationEngine

router = APIRouter()


@router.get("/activities", response_model=List[AgentActivityResponse])
async def list_activities(engine: SimulationEngine = Depends(get_engine)):
    """Agent activities of the live scenario, in creation order."""
    return [activity.to_dict() for activity in engine.state.activities]


@router.get("/messages", response_model=List[AgentMessageResponse])
async def list_messages(engine: SimulationEngine = Depends(get_engine)):
    return [message.to_dict() for message in engine.state.messages]
