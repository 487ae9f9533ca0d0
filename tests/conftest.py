"""Shared fixtures: small GeoJSON datasets and a recording map widget."""

from typing import Any, Dict, List

import pytest


def square(x0: float, y0: float, size: float = 1.0) -> Dict[str, Any]:
    return {
        "type": "Polygon",
        "coordinates": [[
            [x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0],
        ]],
    }


# U-shaped polygon: its bounding-box center (2, 2) falls in the notch
U_SHAPE = {
    "type": "Polygon",
    "coordinates": [[
        [0, 0], [4, 0], [4, 4], [3, 4], [3, 1], [1, 1], [1, 4], [0, 4], [0, 0],
    ]],
}


class RecordingWidget:
    """Stand-in for the map widget command bus."""

    def __init__(self) -> None:
        self.commands: List[Dict[str, Any]] = []

    def _send(self, cmd: Dict[str, Any]) -> None:
        self.commands.append(cmd)

    def of_type(self, cmd_type: str) -> List[Dict[str, Any]]:
        return [c for c in self.commands if c.get("type") == cmd_type]


@pytest.fixture
def widget() -> RecordingWidget:
    return RecordingWidget()


@pytest.fixture
def states_geojson() -> Dict[str, Any]:
    """Six squares with densities 10..60 plus one feature without data."""
    features = [
        {
            "type": "Feature",
            "id": f"s{i}",
            "properties": {"name": f"State {i}", "density": 10 * (i + 1)},
            "geometry": square(float(i * 2), 0.0),
        }
        for i in range(6)
    ]
    features.append(
        {
            "type": "Feature",
            "id": "nodata",
            "properties": {"name": "Unknown", "density": "n/a"},
            "geometry": square(20.0, 0.0),
        }
    )
    return {"type": "FeatureCollection", "features": features}
