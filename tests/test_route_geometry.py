"""Route curve construction and sampling."""

import math

import pytest

from src.data_layer.locations import LOCATIONS, get_location
from src.data_layer.route_geometry import (
    DEFAULT_ROUTE_PLANS,
    RoutePoint,
    RouteRegistry,
    UnknownRouteError,
    build_path_string,
    build_route,
    sample_route,
    segment_ranges,
)


def _distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def test_path_string_uses_horizontal_midpoint_control(routes):
    route = routes.get("R002")
    # Origin 2 (15, 83) -> Checkpoint E (20, 75) -> Central Hub (50, 55)
    assert route.path_string == "M 15 83 Q 17.5 83 20 75 Q 35 75 50 55"


def test_path_string_edge_cases():
    assert build_path_string([]) == ""
    assert build_path_string([RoutePoint("A", 1, 2)]) == "M 1 2"


def test_fewer_than_two_points_yields_no_samples():
    assert sample_route([]) == []
    assert sample_route([RoutePoint("A", 10, 10)]) == []

    route = build_route("RX", "#000000", [("Central Hub", False)])
    assert route.samples == ()
    assert route.segment_count == 0
    assert segment_ranges(route) == []


def test_samples_start_and_end_on_waypoints(routes):
    for route in routes:
        first, last = route.points[0], route.points[-1]
        assert (route.samples[0].x, route.samples[0].y) == (first.x, first.y)
        assert route.samples[-1].x == pytest.approx(last.x)
        assert route.samples[-1].y == pytest.approx(last.y)


def test_sample_count_per_leg(routes):
    # 100 requested samples: 2 legs -> 50 steps each, 4 legs -> 25, 3 legs -> 33
    assert len(routes.get("R002").samples) == 2 * 51
    assert len(routes.get("R001").samples) == 4 * 26
    assert len(routes.get("R005").samples) == 3 * 34


def test_samples_are_continuous(routes):
    """No jump between consecutive samples exceeds the largest leg's control polygon."""
    for route in routes:
        spans = []
        for start, end in zip(route.points, route.points[1:]):
            control = RoutePoint("c", (start.x + end.x) / 2, start.y)
            spans.append(_distance(start, control) + _distance(control, end))
        max_span = max(spans)

        for a, b in zip(route.samples, route.samples[1:]):
            assert _distance(a, b) <= max_span


def test_bezier_midpoint_matches_formula():
    points = [RoutePoint("A", 0, 0), RoutePoint("B", 40, 80)]
    samples = sample_route(points, num_points=10)
    middle = samples[5]  # t = 0.5
    # C = (20, 0): B(0.5) = 0.25*P0 + 0.5*C + 0.25*P1
    assert middle.x == pytest.approx(20.0)
    assert middle.y == pytest.approx(20.0)


def test_segment_ranges_split_samples_proportionally(routes):
    assert segment_ranges(routes.get("R005")) == [(0, 34), (34, 34), (68, 34)]
    assert segment_ranges(routes.get("R002")) == [(0, 51), (51, 51)]


def test_build_route_uses_location_coordinates():
    route = build_route("RZ", "#123456", [("Origin 1", False), ("Checkpoint A", True)])
    assert route.points[0].x == LOCATIONS["Origin 1"]["x"]
    assert route.points[1].is_checkpoint is True
    assert route.start.x == 5 and route.start.y == 70


def test_registry_lookup(routes):
    assert len(routes) == len(DEFAULT_ROUTE_PLANS)
    assert routes.ids() == ["R001", "R002", "R003", "R004", "R005"]
    assert "R003" in routes
    assert routes.find("R999") is None
    with pytest.raises(UnknownRouteError):
        routes.get("R999")


def test_geometry_is_computed_once(routes):
    assert routes.find("R001").samples is routes.find("R001").samples


def test_custom_registry_resolution():
    registry = RouteRegistry.from_plans(num_points=20)
    assert len(registry.get("R002").samples) == 2 * 11


def test_route_to_dict_can_omit_samples(routes):
    data = routes.get("R003").to_dict(include_samples=False)
    assert "samples" not in data
    assert data["points"][0]["name"] == "Central Hub"


def test_get_location_unknown():
    assert get_location("Central Hub") == {"x": 50, "y": 55}
    with pytest.raises(KeyError):
        get_location("Nowhere")
