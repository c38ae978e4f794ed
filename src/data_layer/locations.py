"""
Named locations on the dashboard map.
Coordinates live in a normalized 0~100 plane (x to the right, y downwards),
the same box the SVG map uses as its viewBox.
"""

from typing import Dict


# Origins, hub, destinations and checkpoints of the regional network
LOCATIONS: Dict[str, Dict[str, float]] = {
    "Origin 1": {"x": 5, "y": 70},
    "Origin 2": {"x": 15, "y": 83},
    "Origin 3": {"x": 10, "y": 90},
    "Central Hub": {"x": 50, "y": 55},
    "Destination 1": {"x": 70, "y": 90},
    "Destination 2": {"x": 80, "y": 25},
    "Checkpoint E": {"x": 20, "y": 75},
    "Checkpoint F": {"x": 60, "y": 70},
    "Checkpoint A": {"x": 25, "y": 60},
    "Checkpoint B": {"x": 65, "y": 40},
    "Checkpoint C": {"x": 40, "y": 80},
    "Checkpoint D": {"x": 35, "y": 40},
}


def get_location(name: str) -> Dict[str, float]:
    """Return a copy of the named location's coordinates."""
    if name not in LOCATIONS:
        raise KeyError(f"Unknown location: {name}")
    return dict(LOCATIONS[name])
