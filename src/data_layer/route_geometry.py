"""
Route geometry for the logistics map.

Every route is a chain of waypoints joined by quadratic Bezier curves.
For the leg P_i -> P_i+1 the control point is (midpoint of the x values, y of P_i),
so legs bow horizontally. The path string and the sample table are built once
per route and shared by every truck assigned to it.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from src.data_layer.locations import LOCATIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """A point in the 0~100 map plane."""
    x: float
    y: float


@dataclass(frozen=True)
class RoutePoint:
    """A named waypoint on a route."""
    name: str
    x: float
    y: float
    is_checkpoint: bool = False


@dataclass(frozen=True)
class Route:
    """
    Immutable route with its derived curve.

    path_string: SVG path descriptor ("M x y Q cx cy x y ...")
    samples: dense, ordered points along the whole curve
    """
    id: str
    color: str
    points: Tuple[RoutePoint, ...]
    path_string: str = ""
    samples: Tuple[Position, ...] = field(default=(), repr=False)

    @property
    def segment_count(self) -> int:
        return max(len(self.points) - 1, 0)

    @property
    def start(self) -> Optional[Position]:
        if not self.points:
            return None
        return Position(self.points[0].x, self.points[0].y)

    def to_dict(self, include_samples: bool = True) -> Dict[str, Any]:
        data = asdict(self)
        if not include_samples:
            data.pop("samples")
        return data


class UnknownRouteError(KeyError):
    """Raised when a route id is not registered."""


def _control_point(start: RoutePoint, end: RoutePoint) -> Tuple[float, float]:
    # Horizontal midpoint, start height: legs bow sideways only
    return (start.x + end.x) / 2, start.y


def _fmt(value: float) -> str:
    return f"{value:g}"


def build_path_string(points: Sequence[RoutePoint]) -> str:
    """SVG path descriptor for a waypoint chain. Empty for an empty chain."""
    if not points:
        return ""

    parts = [f"M {_fmt(points[0].x)} {_fmt(points[0].y)}"]
    for prev_point, current_point in zip(points, points[1:]):
        cx, cy = _control_point(prev_point, current_point)
        parts.append(
            f"Q {_fmt(cx)} {_fmt(cy)} {_fmt(current_point.x)} {_fmt(current_point.y)}"
        )
    return " ".join(parts)


def sample_route(points: Sequence[RoutePoint], num_points: int = 100) -> List[Position]:
    """
    Sample the route curve at a fixed resolution.

    Each leg gets num_points // legs steps and is sampled at
    t = 0, 1/steps, ..., 1 with
        B(t) = (1-t)^2 P0 + 2(1-t)t C + t^2 P1
    Legs are concatenated in waypoint order, so the first sample is the first
    waypoint and the last sample is the last waypoint.

    Returns:
        Ordered list of positions. Empty if fewer than two waypoints.
    """
    coordinates: List[Position] = []
    if len(points) < 2:
        return coordinates

    legs = len(points) - 1
    steps = max(num_points // legs, 1)

    for start_point, end_point in zip(points, points[1:]):
        cx, cy = _control_point(start_point, end_point)
        for j in range(steps + 1):
            t = j / steps
            one_minus_t = 1 - t
            x = (
                one_minus_t * one_minus_t * start_point.x
                + 2 * one_minus_t * t * cx
                + t * t * end_point.x
            )
            y = (
                one_minus_t * one_minus_t * start_point.y
                + 2 * one_minus_t * t * cy
                + t * t * end_point.y
            )
            coordinates.append(Position(x, y))

    return coordinates


def segment_ranges(route: Route) -> List[Tuple[int, int]]:
    """
    (start_index, length) of every leg inside route.samples.

    A leg's share is proportional to the total sample count, so legs are
    resolved the same way regardless of how many points each one produced.
    """
    legs = route.segment_count
    total = len(route.samples)
    if legs == 0 or total == 0:
        return []

    per_leg = total / legs
    ranges = []
    for i in range(legs):
        start = int(i * per_leg)
        end = int((i + 1) * per_leg)
        ranges.append((start, end - start))
    return ranges


def build_route(
    route_id: str,
    color: str,
    waypoints: Sequence[Tuple[str, bool]],
    num_points: int = 100,
    locations: Optional[Dict[str, Dict[str, float]]] = None,
) -> Route:
    """
    Build a route from (location name, is_checkpoint) pairs.

    Args:
        route_id: Route identifier (e.g. "R001")
        color: Display colour for the stroke
        waypoints: Ordered waypoint names with their checkpoint flag
        num_points: Requested sample resolution for the whole route
        locations: Name -> {"x", "y"} lookup (defaults to the map locations)
    """
    locations = locations if locations is not None else LOCATIONS
    points = tuple(
        RoutePoint(
            name=name,
            x=locations[name]["x"],
            y=locations[name]["y"],
            is_checkpoint=is_checkpoint,
        )
        for name, is_checkpoint in waypoints
    )
    return Route(
        id=route_id,
        color=color,
        points=points,
        path_string=build_path_string(points),
        samples=tuple(sample_route(points, num_points)),
    )


# Route plans: (location, is_checkpoint) in driving order
DEFAULT_ROUTE_PLANS: Dict[str, Dict[str, Any]] = {
    "R001": {
        "color": "#3B82F6",  # blue
        "waypoints": [
            ("Origin 1", False),
            ("Checkpoint A", True),
            ("Central Hub", True),
            ("Checkpoint B", True),
            ("Destination 2", False),
        ],
    },
    "R002": {
        "color": "#EF4444",  # red
        "waypoints": [
            ("Origin 2", False),
            ("Checkpoint E", True),
            ("Central Hub", False),
        ],
    },
    "R003": {
        "color": "#10B981",  # green
        "waypoints": [
            ("Central Hub", False),
            ("Checkpoint F", True),
            ("Destination 1", False),
        ],
    },
    "R004": {
        "color": "#F59E0B",  # amber
        "waypoints": [
            ("Origin 3", False),
            ("Checkpoint C", True),
            ("Central Hub", False),
        ],
    },
    "R005": {
        "color": "#8B5CF6",  # purple
        "waypoints": [
            ("Central Hub", False),
            ("Checkpoint D", True),
            ("Checkpoint B", True),
            ("Destination 2", False),
        ],
    },
}


class RouteRegistry:
    """
    Read-only collection of routes, keyed by id.
    Geometry is computed once in the constructor and never again.
    """

    def __init__(self, routes: Sequence[Route]):
        self._routes: Dict[str, Route] = {route.id: route for route in routes}

    @classmethod
    def from_plans(
        cls,
        plans: Optional[Dict[str, Dict[str, Any]]] = None,
        num_points: int = 100,
    ) -> "RouteRegistry":
        plans = plans if plans is not None else DEFAULT_ROUTE_PLANS
        routes = [
            build_route(route_id, plan["color"], plan["waypoints"], num_points)
            for route_id, plan in plans.items()
        ]
        logger.debug("Built %d routes at %d samples each", len(routes), num_points)
        return cls(routes)

    def find(self, route_id: str) -> Optional[Route]:
        """Lenient lookup: None when the id is unknown."""
        return self._routes.get(route_id)

    def get(self, route_id: str) -> Route:
        route = self._routes.get(route_id)
        if route is None:
            raise UnknownRouteError(route_id)
        return route

    def ids(self) -> List[str]:
        return list(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._routes

