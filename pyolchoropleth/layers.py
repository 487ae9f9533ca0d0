from __future__ import annotations

import copy
import dataclasses
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .classifier import ColorClassifier, extract_samples, legend_entries
from .models import (
    ChoroplethOptions,
    ColorScaleConfig,
    Coordinate,
    FeatureId,
    FeatureRef,
    FeatureStyle,
    OverlayOptions,
    Pixel,
    SelectionState,
)
from .schemes import get_scheme
from .selection import CLICK, MapCapabilities, SelectionCoordinator

logger = logging.getLogger(__name__)


class BaseLayer:
    def __init__(self, widget: Any, layer_id: str, name: str = ""):
        self._w = widget
        self.id = layer_id
        self.name = name or layer_id

    def remove(self) -> None:
        self._w._send({"type": "layer.remove", "layer_id": self.id})

    def set_opacity(self, opacity: float) -> None:
        self._w._send(
            {"type": "layer.opacity", "layer_id": self.id, "opacity": float(opacity)}
        )


class ChoroplethLayer(BaseLayer):
    """
    A polygon layer shaded by a numeric feature property.

    The layer owns the widget handle for its lifetime and hands capability
    callables (overlay placement, view animation) to its SelectionCoordinator.
    Commands go to the widget through its ``_send(dict)`` command bus.

    data: GeoJSON FeatureCollection dict or a sequence of feature dicts
    value_property: property classified into colors
    palette: color tokens; defaults to the first built-in scheme of the scale kind
    """

    def __init__(
        self,
        widget: Any,
        layer_id: str,
        data: Any,
        value_property: str,
        palette: Optional[Sequence[Any]] = None,
        *,
        options: Optional[ChoroplethOptions] = None,
        overlay_options: Optional[OverlayOptions] = None,
        capabilities: Optional[MapCapabilities] = None,
        name: str = "",
    ):
        super().__init__(widget, layer_id, name=name)
        self.options = options or ChoroplethOptions()
        self.overlay_options = overlay_options or OverlayOptions()
        self.value_property = value_property
        self._palette: Tuple[Any, ...] = tuple(
            palette if palette is not None else get_scheme(self.options.scale_kind)
        )

        self._features: List[Dict[str, Any]] = []
        self._index: Dict[FeatureId, Dict[str, Any]] = {}
        self._load_features(data)
        self._classifier = self._build_classifier()

        # Fill widget defaults on a copy; a shared capabilities object stays untouched
        caps = dataclasses.replace(capabilities) if capabilities is not None else MapCapabilities()
        if caps.set_overlay_position is None:
            caps.set_overlay_position = self._send_overlay_position
        if caps.set_overlay_content is None:
            caps.set_overlay_content = self._send_overlay_content
        if caps.animate_viewport is None:
            caps.animate_viewport = self._send_view_animate

        self._updating = False
        self.selection = SelectionCoordinator.from_options(self.options, caps)
        self.selection.selectionChanged.connect(self._on_selection_changed)

        self._w._send(
            {
                "type": "choropleth.add",
                "layer_id": self.id,
                "name": self.name,
                "geojson": self.geojson,
                "styles": self.feature_styles(),
                "overlay": self.overlay_options.to_js(),
                "trigger": self.options.overlay_trigger,
            }
        )

    # ---------- data ----------
    @property
    def geojson(self) -> Dict[str, Any]:
        return {"type": "FeatureCollection", "features": list(self._features)}

    @property
    def classifier(self) -> ColorClassifier:
        return self._classifier

    @property
    def scale_config(self) -> ColorScaleConfig:
        return self.options.scale_config(self._palette)

    def _load_features(self, data: Any) -> None:
        features = data.get("features", []) if isinstance(data, Mapping) else data
        self._features = []
        self._index = {}
        for i, feature in enumerate(features or []):
            f = copy.deepcopy(dict(feature))
            if f.get("id") is None:
                f["id"] = i
            if not f.get("properties"):
                f["properties"] = {}
            if f["id"] in self._index:
                logger.warning(
                    "Layer %s: duplicate feature id %r, the later feature wins",
                    self.id, f["id"],
                )
            self._features.append(f)
            self._index[f["id"]] = f

    def _build_classifier(self) -> ColorClassifier:
        samples = extract_samples(self._features, self.value_property)
        return ColorClassifier.build(samples, self.scale_config)

    def set_data(self, data: Any) -> None:
        """Replace the feature collection; any selection is dropped."""
        self._load_features(data)
        self._classifier = self._build_classifier()
        logger.debug(
            "Layer %s: %d features, %d classified",
            self.id, len(self._features), self._classifier.sample_count,
        )
        self._updating = True
        try:
            self.selection.dataset_replaced()
        finally:
            self._updating = False
        self._w._send(
            {
                "type": "choropleth.set_data",
                "layer_id": self.id,
                "geojson": self.geojson,
                "styles": self.feature_styles(),
            }
        )

    def set_value_property(self, value_property: str) -> None:
        self.value_property = value_property
        self._classifier = self._build_classifier()
        self.refresh_styles()

    def set_color_scale(
        self,
        palette: Sequence[Any],
        options: Optional[ChoroplethOptions] = None,
    ) -> None:
        """Swap palette and/or scale options; selection behavior follows the new options."""
        self._palette = tuple(palette)
        if options is not None:
            self.options = options
            self.selection.zoom_to_selection = options.zoom_to_selection
            self.selection.overlay_trigger = options.overlay_trigger
        self._classifier = self._build_classifier()
        self.refresh_styles()

    # ---------- styling ----------
    def color_for(self, feature_id: FeatureId) -> str:
        feature = self._index.get(feature_id)
        value = feature["properties"].get(self.value_property) if feature else None
        return self._classifier(value)

    def feature_styles(self) -> Dict[str, Dict[str, Any]]:
        """Per-feature style payloads keyed by ``str(feature_id)``."""
        active = self.selection.active_feature_id
        border = self.options.selection_border_color
        return {
            str(fid): FeatureStyle.for_feature(
                self.color_for(fid), fid == active, border
            ).to_js()
            for fid in self._index
        }

    def refresh_styles(self) -> None:
        self._w._send(
            {
                "type": "choropleth.set_styles",
                "layer_id": self.id,
                "styles": self.feature_styles(),
            }
        )

    def legend(self) -> List[Tuple[str, str]]:
        samples = extract_samples(self._features, self.value_property)
        return legend_entries(samples, self.scale_config)

    # ---------- selection ----------
    def select_feature(self, feature_id: FeatureId, trigger: str = CLICK) -> SelectionState:
        """Select a feature picked by the widget; unknown ids clear the selection."""
        feature = self._index.get(feature_id)
        if feature is None:
            return self.selection.pointer_resolves_to_no_feature()
        return self.selection.pointer_resolves_to_feature(
            feature_id, feature.get("geometry"), feature["properties"], trigger=trigger
        )

    def clear_selection(self) -> SelectionState:
        return self.selection.pointer_resolves_to_no_feature()

    def feature_ref(self, feature_id: FeatureId) -> Optional[FeatureRef]:
        feature = self._index.get(feature_id)
        if feature is None:
            return None
        return FeatureRef(feature_id, feature.get("geometry"), feature["properties"])

    def handle_map_event(self, ev: Mapping[str, Any]) -> None:
        """Apply a "select" event coming back from JS.

        Expected payload: {"type": "select", "layer_id": ..., "feature_ids": [...],
        "trigger": "click" | "hover"}
        """
        if ev.get("type") != "select" or ev.get("layer_id") != self.id:
            return
        trigger = ev.get("trigger", CLICK)
        if trigger != CLICK and self.options.overlay_trigger != trigger:
            return
        ids = ev.get("feature_ids") or []
        if not ids:
            self.selection.pointer_resolves_to_no_feature()
            return
        fid = self._lookup_id(ids[0])
        if trigger != CLICK and fid == self.selection.active_feature_id:
            return
        self.select_feature(fid, trigger=trigger)

    def _lookup_id(self, raw_id: Any) -> Any:
        # JS round-trips ids as strings
        if raw_id in self._index:
            return raw_id
        for fid in self._index:
            if str(fid) == str(raw_id):
                return fid
        return raw_id

    def on_pointer_click(self, pixel: Pixel) -> SelectionState:
        return self.selection.on_pointer_click(pixel)

    def on_pointer_move(self, pixel: Pixel) -> SelectionState:
        return self.selection.on_pointer_move(pixel)

    def _on_selection_changed(self, state: SelectionState) -> None:
        if self._updating:
            return
        self.refresh_styles()

    # ---------- widget commands ----------
    def _send_overlay_position(self, coordinate: Optional[Coordinate]) -> None:
        self._w._send(
            {
                "type": "overlay.set_position",
                "layer_id": self.id,
                "coordinate": (
                    [float(coordinate[0]), float(coordinate[1])]
                    if coordinate is not None else None
                ),
            }
        )

    def _send_overlay_content(self, content: Any) -> None:
        payload = content.to_js() if hasattr(content, "to_js") else {"html": str(content)}
        self._w._send(
            {"type": "overlay.set_content", "layer_id": self.id, "content": payload}
        )

    def _send_view_animate(self, center: Coordinate, zoom: float, duration_ms: int) -> None:
        self._w._send(
            {
                "type": "view.animate",
                "center": [float(center[0]), float(center[1])],
                "zoom": float(zoom),
                "duration": int(duration_ms),
            }
        )
