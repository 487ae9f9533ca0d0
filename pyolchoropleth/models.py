from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Mapping, Optional, Sequence, Tuple

from .schemes import NEUTRAL_COLOR, SCALE_KINDS, SEQUENTIAL
from .utils import color_to_css, is_valid_color

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]  # (x, y) in map units, e.g. (lon, lat)
Pixel = Tuple[float, float]
FeatureId = Hashable

OVERLAY_TRIGGERS: Tuple[str, ...] = ("click", "hover")
DEFAULT_BORDER_COLOR = "#0099ff"
MIN_STEP_COUNT = 3

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def _parse_bool(value: Any, name: str) -> bool:
    """Parse a config flag from a bool, 0/1 or a string such as "false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_STRINGS:
            return True
        if token in _FALSE_STRINGS:
            return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Sample:
    """One observation of the classified attribute.

    ``value`` is NaN when the source property was missing or non-numeric.
    """

    feature_id: FeatureId
    value: float


@dataclass(frozen=True)
class ColorScaleConfig:
    """
    Color scale configuration.

    kind: "sequential" | "diverging" | "categorical"
    palette: ordered color tokens ("#rrggbb", color names, ...)
    step_count: number of palette entries actually used (None = all)
    """
    kind: str = SEQUENTIAL
    palette: Tuple[Any, ...] = ()
    step_count: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind not in SCALE_KINDS:
            raise ValueError(f"Unknown scale kind: {self.kind!r} (expected one of {SCALE_KINDS})")
        object.__setattr__(self, "palette", tuple(self.palette))
        if self.step_count is not None and int(self.step_count) < 1:
            raise ValueError(f"step_count must be a positive integer, got {self.step_count!r}")

    @property
    def usable_palette(self) -> Tuple[Any, ...]:
        """The palette prefix classification is allowed to read."""
        if self.step_count is None:
            return self.palette
        return self.palette[: int(self.step_count)]


@dataclass(frozen=True)
class ChoroplethOptions:
    """
    Recognized options of the choropleth surface.

    scale_kind: "sequential" | "diverging" | "categorical"
    step_count: requested number of classes, clamped against the palette
    zoom_to_selection: animate the view to a clicked feature
    overlay_trigger: "click" | "hover"
    selection_border_color: stroke color of the active feature
    """
    scale_kind: str = SEQUENTIAL
    step_count: Optional[int] = None
    zoom_to_selection: bool = False
    overlay_trigger: str = "click"
    selection_border_color: str = DEFAULT_BORDER_COLOR

    def __post_init__(self) -> None:
        if self.scale_kind not in SCALE_KINDS:
            raise ValueError(
                f"Unknown scale kind: {self.scale_kind!r} (expected one of {SCALE_KINDS})"
            )
        if self.overlay_trigger not in OVERLAY_TRIGGERS:
            raise ValueError(
                f"Unknown overlay trigger: {self.overlay_trigger!r} "
                f"(expected one of {OVERLAY_TRIGGERS})"
            )
        if not is_valid_color(self.selection_border_color):
            logger.warning(
                "Invalid selection border color %r, using %s",
                self.selection_border_color,
                DEFAULT_BORDER_COLOR,
            )
            object.__setattr__(self, "selection_border_color", DEFAULT_BORDER_COLOR)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ChoroplethOptions":
        """Create options from a dict using snake_case or camelCase keys."""
        def pick(snake: str, camel: str, default: Any) -> Any:
            if snake in d:
                return d[snake]
            return d.get(camel, default)

        step = pick("step_count", "stepCount", None)
        return cls(
            scale_kind=str(pick("scale_kind", "scaleKind", SEQUENTIAL)),
            step_count=int(step) if step is not None else None,
            zoom_to_selection=_parse_bool(
                pick("zoom_to_selection", "zoomToSelection", False), "zoom_to_selection"
            ),
            overlay_trigger=str(pick("overlay_trigger", "overlayTrigger", "click")),
            selection_border_color=pick(
                "selection_border_color", "selectionBorderColor", DEFAULT_BORDER_COLOR
            ),
        )

    def resolve_step_count(self, palette_length: int) -> int:
        """Clamp the requested step count to ``[3, palette_length]``.

        Palettes shorter than three colors use every color they have.
        """
        n = int(palette_length)
        if n < MIN_STEP_COUNT:
            return max(n, 1)
        if self.step_count is None:
            return n
        return max(MIN_STEP_COUNT, min(int(self.step_count), n))

    def scale_config(self, palette: Sequence[Any]) -> ColorScaleConfig:
        palette = tuple(palette)
        return ColorScaleConfig(
            kind=self.scale_kind,
            palette=palette,
            step_count=self.resolve_step_count(len(palette)) if palette else None,
        )


@dataclass(frozen=True)
class OverlayOptions:
    """
    Overlay placement options, forwarded to ol/Overlay.

    positioning: e.g. "bottom-center", "top-left"
    offset: pixel offset from the anchor
    auto_pan / auto_pan_duration: pan the view so the overlay is visible
    """
    positioning: str = "bottom-center"
    offset: Tuple[int, int] = (0, -10)
    auto_pan: bool = True
    auto_pan_duration: int = 250

    def to_js(self) -> Dict[str, Any]:
        return {
            "positioning": self.positioning,
            "offset": [int(self.offset[0]), int(self.offset[1])],
            "auto_pan": bool(self.auto_pan),
            "auto_pan_duration": int(self.auto_pan_duration),
        }


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Coordinate:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)


@dataclass(frozen=True)
class ViewportRequest:
    """Target of a viewport animation."""

    center: Coordinate
    zoom: float
    duration_ms: int

    def to_js(self) -> Dict[str, Any]:
        return {
            "center": [float(self.center[0]), float(self.center[1])],
            "zoom": float(self.zoom),
            "duration": int(self.duration_ms),
        }


@dataclass(frozen=True)
class FeatureRef:
    """A feature resolved by a hit test."""

    feature_id: FeatureId
    geometry: Any
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectionState:
    active_feature_id: Optional[FeatureId] = None
    anchor: Optional[Coordinate] = None
    overlay_visible: bool = False
    properties: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.active_feature_id is not None


@dataclass(frozen=True)
class FeatureStyle:
    """
    Per-feature polygon style of a choropleth layer.

    The fill carries the class color; the stroke marks the active feature.
    """
    fill_color: str = NEUTRAL_COLOR
    fill_opacity: float = 0.8
    stroke_color: str = "#3d3d3d"
    stroke_width: float = 1.0
    stroke_opacity: float = 1.0

    @classmethod
    def for_feature(cls, fill_color: str, selected: bool, border_color: str) -> "FeatureStyle":
        if selected:
            return cls(fill_color=fill_color, stroke_color=border_color, stroke_width=3.0)
        return cls(fill_color=fill_color)

    def to_js(self) -> Dict[str, Any]:
        return {
            "fill": color_to_css(self.fill_color, self.fill_opacity),
            "stroke": color_to_css(self.stroke_color, self.stroke_opacity),
            "stroke_width": float(self.stroke_width),
        }
