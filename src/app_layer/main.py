"""
FastAPI application entry point.

    uvicorn src.app_layer.main:app
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from src.app_layer.dependencies import get_cached_settings, get_engine
from src.app_layer.routers import agents, routes, simulation
from src.simulation_layer.engine import SimulationEngine

logger = logging.getLogger(__name__)


async def tick_loop(engine: SimulationEngine, interval: float) -> None:
    """Drive engine.tick() every `interval` seconds until cancelled."""
    while True:
        try:
            engine.tick()
        except Exception:
            logger.exception("Simulation tick failed")
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build the engine, optionally arm a scenario, start ticking
    settings = get_cached_settings().simulation
    engine = get_engine()
    if settings.default_scenario:
        engine.select_scenario(settings.default_scenario)

    tick_task = None
    if settings.auto_tick:
        tick_task = asyncio.create_task(tick_loop(engine, settings.tick_interval_s))
        logger.info("Tick loop started (every %.3fs)", settings.tick_interval_s)
    yield
    # Shutdown: stop ticking, drop pending scenario timers
    if tick_task is not None:
        tick_task.cancel()
        with suppress(asyncio.CancelledError):
            await tick_task
    engine.runner.cancel()


app = FastAPI(
    title="Logistics Simulation API",
    description="Route animation and scripted disruption scenarios for the supply-chain dashboard",
    version="0.3.0",
    lifespan=lifespan,
)

app.include_router(
    simulation.router, prefix="/api/v1/simulation", tags=["simulation"]
)
app.include_router(
    agents.router, prefix="/api/v1/agents", tags=["agents"]
)
app.include_router(
    routes.router, prefix="/api/v1/routes", tags=["routes"]
)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
