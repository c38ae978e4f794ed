"""
Default truck fleet for the dashboard map.
One truck per route; the profile holds everything a reset restores.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class TruckProfile:
    """Initial values of a tracked truck."""
    id: str
    name: str
    initial: str            # starting location name
    destination: str
    route_id: str
    eta: str                # display ETA, e.g. "45 min"
    checkpoints: Tuple[str, ...] = field(default=())


DEFAULT_FLEET: List[TruckProfile] = [
    TruckProfile(
        id="T001",
        name="Truck 1",
        initial="Origin 1",
        checkpoints=("Checkpoint A", "Central Hub", "Checkpoint B"),
        destination="Destination 2",
        route_id="R001",
        eta="45 min",
    ),
    TruckProfile(
        id="T002",
        name="Truck 2",
        initial="Origin 2",
        checkpoints=("Checkpoint E",),
        destination="Central Hub",
        route_id="R002",
        eta="30 min",
    ),
    TruckProfile(
        id="T003",
        name="Truck 3",
        initial="Central Hub",
        checkpoints=("Checkpoint F",),
        destination="Destination 1",
        route_id="R003",
        eta="75 min",
    ),
    TruckProfile(
        id="T004",
        name="Truck 4",
        initial="Origin 3",
        checkpoints=("Checkpoint C",),
        destination="Central Hub",
        route_id="R004",
        eta="55 min",
    ),
    TruckProfile(
        id="T005",
        name="Truck 5",
        initial="Central Hub",
        checkpoints=("Checkpoint D", "Checkpoint B"),
        destination="Destination 2",
        route_id="R005",
        eta="15 min",
    ),
]
