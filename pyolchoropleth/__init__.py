from .classifier import (
    ColorClassifier,
    ColorRamp,
    extract_samples,
    legend_entries,
)
from .models import (
    BoundingBox,
    ChoroplethOptions,
    ColorScaleConfig,
    FeatureRef,
    FeatureStyle,
    OverlayOptions,
    Sample,
    SelectionState,
    ViewportRequest,
)
from .schemes import (
    DEFAULT_RAMP,
    NEUTRAL_COLOR,
    SCHEMES,
    get_scheme,
)
from .overlay import OverlayContent, render_overlay
from .selection import MapCapabilities, SelectionCoordinator
from .layers import ChoroplethLayer

__all__ = [
    # Classification
    "ColorClassifier",
    "ColorRamp",
    "ColorScaleConfig",
    "Sample",
    "extract_samples",
    "legend_entries",
    # Palettes
    "SCHEMES",
    "DEFAULT_RAMP",
    "NEUTRAL_COLOR",
    "get_scheme",
    # Selection
    "SelectionCoordinator",
    "MapCapabilities",
    "SelectionState",
    "FeatureRef",
    "BoundingBox",
    "ViewportRequest",
    # Overlay
    "OverlayContent",
    "OverlayOptions",
    "render_overlay",
    # Rendering surface
    "ChoroplethLayer",
    "ChoroplethOptions",
    "FeatureStyle",
]
