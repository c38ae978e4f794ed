"""
Truck motion along precomputed route curves.

Progress is a percentage of the current leg. Position is looked up in the
route's sample table, never integrated, so it cannot drift.
"""

import math
from typing import Optional

from src.data_layer.route_geometry import Position, Route, RouteRegistry, segment_ranges
from src.simulation_layer.models import TruckState

_MAX_PROGRESS = math.nextafter(100.0, 0.0)


def resolve_position(route: Optional[Route], segment: int, progress: float) -> Optional[Position]:
    """
    Map (segment, progress) to a sampled point on the route.

    Each leg owns a proportional slice of route.samples; the index inside the
    slice is floor(progress / 100 * slice_length). Out-of-range results are
    clamped to the table.

    Returns:
        The sampled position, or None when there is nothing to sample
        (unknown route or a route with fewer than two waypoints).
    """
    if route is None or not route.samples:
        return None

    ranges = segment_ranges(route)
    segment = min(max(segment, 0), len(ranges) - 1)
    start, length = ranges[segment]
    length = length or 1

    index = math.floor(start + (progress / 100) * length)
    index = min(max(index, 0), len(route.samples) - 1)
    return route.samples[index]


def place_truck(truck: TruckState, route: Optional[Route], segment: int, progress: float) -> bool:
    """
    Move a truck to (segment, progress) and re-resolve its position.
    Leaves the truck untouched when the route cannot be resolved.
    """
    if route is None or route.segment_count == 0:
        return False
    segment = min(max(segment, 0), route.segment_count - 1)
    progress = min(max(progress, 0.0), _MAX_PROGRESS)
    position = resolve_position(route, segment, progress)
    if position is None:
        return False
    truck.current_segment = segment
    truck.progress = progress
    truck.position = position
    return True


def reset_to_start(truck: TruckState, route: Optional[Route]) -> None:
    """Put a truck back on the first waypoint of its route."""
    truck.current_segment = 0
    truck.progress = 0.0
    if route is not None and route.start is not None:
        truck.position = route.start


def advance_truck(truck: TruckState, route: Optional[Route], increment: float) -> None:
    """
    One motion step.

    progress += increment; a finished leg moves to the next one with progress 0,
    and a finished route wraps to the first waypoint.
    """
    if route is None or route.segment_count == 0:
        return

    new_progress = truck.progress + increment
    new_segment = truck.current_segment

    if new_progress >= 100:
        new_segment += 1
        new_progress = 0.0
        if new_segment >= route.segment_count:
            reset_to_start(truck, route)
            return

    place_truck(truck, route, new_segment, new_progress)


class MotionModel:
    """Advances every truck by a constant progress increment per tick."""

    def __init__(self, routes: RouteRegistry, increment: float = 0.5):
        self.routes = routes
        self.increment = increment

    def step(self, truck: TruckState) -> None:
        advance_truck(truck, self.routes.find(truck.route_id), self.increment)

    def tick(self, trucks) -> None:
        for truck in trucks:
            self.step(truck)

    def position_for(self, truck: TruckState) -> Optional[Position]:
        """Position the truck should be at given its route, segment and progress."""
        return resolve_position(
            self.routes.find(truck.route_id), truck.current_segment, truck.progress
        )
