"""
Route geometry endpoints for drawing the map.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from src.app_layer.dependencies import get_engine
from src.app_layer.schemas import RouteResponse
from src.data_layer.route_geometry import UnknownRouteError
from src.simulation_layer.engine import SimulationEngine

router = APIRouter()


@router.get("/", response_model=List[RouteResponse])
async def list_routes(
    include_samples: bool = Query(default=False),
    engine: SimulationEngine = Depends(get_engine),
):
    """All routes with their SVG path; samples only on request."""
    return [route.to_dict(include_samples=include_samples) for route in engine.routes]


@router.get("/{route_id}", response_model=RouteResponse)
async def get_route(route_id: str, engine: SimulationEngine = Depends(get_engine)):
    try:
        route = engine.routes.get(route_id)
    except UnknownRouteError:
        raise HTTPException(status_code=404, detail=f"Unknown route: {route_id}")
    return route.to_dict()
