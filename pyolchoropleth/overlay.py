from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Tuple

# Feature properties never shown in the overlay
HIDDEN_PROPERTIES = frozenset({"geometry"})

OVERLAY_CSS_CLASS = "ol-choropleth__overlay"


@dataclass(frozen=True)
class OverlayContent:
    """Host-neutral description of the overlay for the active feature.

    rows: (property name, display value) pairs in property order.
    """
    rows: Tuple[Tuple[str, str], ...] = ()

    def to_html(self) -> str:
        items = "".join(
            f'<div class="{OVERLAY_CSS_CLASS}-property">'
            f"<strong>{html.escape(key)}:</strong> {html.escape(value)}</div>"
            for key, value in self.rows
        )
        return f'<div class="{OVERLAY_CSS_CLASS}">{items}</div>'

    def to_js(self) -> dict:
        return {"rows": [[k, v] for k, v in self.rows], "html": self.to_html()}


OverlayRenderer = Callable[[Mapping[str, Any]], Any]


def render_overlay(properties: Mapping[str, Any]) -> OverlayContent:
    """Default overlay renderer: one row per visible property."""
    return OverlayContent(
        rows=tuple(
            (str(key), str(value))
            for key, value in properties.items()
            if key not in HIDDEN_PROPERTIES
        )
    )
