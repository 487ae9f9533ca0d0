#!/usr/bin/env python3
"""Selection Example

This example drives a ChoroplethLayer without a real map:
- A printing stand-in receives the widget commands
- Clicks are resolved by a toy hit test keyed by pixel
- Zoom-to-selection requests a view animation on click
"""

import json

from pyolchoropleth import ChoroplethLayer, ChoroplethOptions, MapCapabilities, get_scheme


class PrintingWidget:
    def _send(self, cmd):
        summary = {k: v for k, v in cmd.items() if k not in ("geojson", "styles")}
        print(json.dumps(summary))


def region(fid, name, value, x0):
    return {
        "type": "Feature",
        "id": fid,
        "properties": {"name": name, "density": value},
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[x0, 40], [x0 + 4, 40], [x0 + 4, 44], [x0, 44], [x0, 40]]],
        },
    }


def main():
    """Select, switch and clear a feature, then swap the dataset."""
    data = {
        "type": "FeatureCollection",
        "features": [
            region("ca", "California", 251.3, -124.0),
            region("nv", "Nevada", 24.8, -119.0),
            region("az", "Arizona", 57.0, -114.0),
        ],
    }
    pixels = {(100, 100): "ca", (300, 100): "nv"}

    layer = None

    def hit_test(pixel):
        fid = pixels.get(pixel)
        return layer.feature_ref(fid) if fid is not None else None

    layer = ChoroplethLayer(
        PrintingWidget(),
        "states",
        data,
        "density",
        get_scheme("sequential", "Greens"),
        options=ChoroplethOptions(zoom_to_selection=True),
        capabilities=MapCapabilities(hit_test=hit_test),
    )

    layer.on_pointer_click((100, 100))
    layer.on_pointer_click((300, 100))
    print("selected:", layer.selection.current_selection())
    layer.on_pointer_click((5, 5))
    print("selected:", layer.selection.current_selection())
    layer.set_data({"type": "FeatureCollection", "features": data["features"][:1]})


if __name__ == "__main__":
    main()
