"""Single-feature selection state machine for choropleth layers.

The coordinator tracks which feature is active, where its overlay is anchored
and whether the view should be refocused on it. It never touches the map
widget directly: the owner of the widget hands in capability callables
(:class:`MapCapabilities`) and the coordinator calls them, in addition to
emitting Qt signals for anything else that wants to listen.

States:
  - Idle: nothing selected, overlay hidden
  - Active(feature_id, anchor): one feature selected, overlay shown at anchor

Example usage:

    caps = MapCapabilities(
        hit_test=lambda pixel: layer_hit_test(pixel),
        set_overlay_position=overlay.set_position,
        animate_viewport=lambda center, zoom, ms: view.animate(center, zoom, ms),
    )
    coordinator = SelectionCoordinator(caps, zoom_to_selection=True)
    coordinator.on_pointer_click((120, 45))
    coordinator.current_selection()  # {"feature_id": ..., "properties": {...}}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from PySide6 import QtCore

from . import geometry as geom
from .models import (
    BoundingBox,
    ChoroplethOptions,
    Coordinate,
    FeatureId,
    FeatureRef,
    Pixel,
    SelectionState,
    ViewportRequest,
)
from .overlay import OverlayRenderer, render_overlay

logger = logging.getLogger(__name__)

CLICK = "click"
HOVER = "hover"

MAX_SELECTION_ZOOM = 6.0
SELECTION_ZOOM_PADDING = 0.5
SELECTION_ANIMATION_MS = 500


@dataclass
class MapCapabilities:
    """Callables supplied by the map widget owner.

    hit_test: pixel -> FeatureRef | None
    interior_point / extent: geometry queries (shapely-backed defaults)
    zoom_for_extent: bounding box -> zoom level | None
    set_overlay_position: coordinate (or None to hide) -> None
    set_overlay_content: rendered overlay content -> None
    animate_viewport: (center, zoom, duration_ms) -> None
    render_overlay: feature properties -> content descriptor
    """
    hit_test: Optional[Callable[[Pixel], Optional[FeatureRef]]] = None
    interior_point: Callable[[Any], Coordinate] = geom.interior_point
    extent: Callable[[Any], BoundingBox] = geom.extent
    zoom_for_extent: Callable[[BoundingBox], Optional[float]] = geom.zoom_for_extent
    set_overlay_position: Optional[Callable[[Optional[Coordinate]], None]] = None
    set_overlay_content: Optional[Callable[[Any], None]] = None
    animate_viewport: Optional[Callable[[Coordinate, float, int], None]] = None
    render_overlay: OverlayRenderer = render_overlay


class SelectionCoordinator(QtCore.QObject):
    """Tracks the active feature and drives overlay and viewport side effects.

    Signals:
        selectionChanged: SelectionState after every transition
        overlayShown: (anchor, content) when the overlay is (re)placed
        overlayHidden: when the overlay is hidden
        viewportRequested: ViewportRequest for click-driven refocus
    """

    selectionChanged = QtCore.Signal(object)
    overlayShown = QtCore.Signal(object, object)
    overlayHidden = QtCore.Signal()
    viewportRequested = QtCore.Signal(object)

    def __init__(
        self,
        capabilities: Optional[MapCapabilities] = None,
        *,
        zoom_to_selection: bool = False,
        overlay_trigger: str = CLICK,
        max_zoom: float = MAX_SELECTION_ZOOM,
        zoom_padding: float = SELECTION_ZOOM_PADDING,
        animation_ms: int = SELECTION_ANIMATION_MS,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        if overlay_trigger not in (CLICK, HOVER):
            raise ValueError(f"Unknown overlay trigger: {overlay_trigger!r}")

        self._caps = capabilities or MapCapabilities()
        self.zoom_to_selection = bool(zoom_to_selection)
        self.overlay_trigger = overlay_trigger
        self.max_zoom = float(max_zoom)
        self.zoom_padding = float(zoom_padding)
        self.animation_ms = max(0, int(animation_ms))

        self._state = SelectionState()
        self._last_viewport: Optional[ViewportRequest] = None

    @classmethod
    def from_options(
        cls,
        options: ChoroplethOptions,
        capabilities: Optional[MapCapabilities] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> SelectionCoordinator:
        return cls(
            capabilities,
            zoom_to_selection=options.zoom_to_selection,
            overlay_trigger=options.overlay_trigger,
            parent=parent,
        )

    # ---------- state ----------
    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def capabilities(self) -> MapCapabilities:
        return self._caps

    @property
    def active_feature_id(self) -> Optional[FeatureId]:
        return self._state.active_feature_id

    @property
    def last_viewport_request(self) -> Optional[ViewportRequest]:
        """Most recent viewport target; newer requests replace older ones."""
        return self._last_viewport

    def current_selection(self) -> Optional[Dict[str, Any]]:
        if not self._state.is_active:
            return None
        return {
            "feature_id": self._state.active_feature_id,
            "properties": dict(self._state.properties),
        }

    # ---------- transitions ----------
    def pointer_resolves_to_feature(
        self,
        feature_id: FeatureId,
        geometry: Any,
        properties: Optional[Mapping[str, Any]] = None,
        *,
        trigger: str = CLICK,
    ) -> SelectionState:
        """Make ``feature_id`` the active feature (from any state).

        Re-selecting the active feature recomputes anchor and overlay content.
        Only click-triggered selection may request a viewport animation.
        """
        props = dict(properties or {})
        anchor = self._anchor_for(geometry)
        was_visible = self._state.overlay_visible

        self._state = SelectionState(
            active_feature_id=feature_id,
            anchor=anchor,
            overlay_visible=anchor is not None,
            properties=props,
        )
        logger.debug("Selected feature %r (%s) at %s", feature_id, trigger, anchor)

        if anchor is not None:
            self._show_overlay(anchor, props)
        elif was_visible:
            self._hide_overlay()

        if self.zoom_to_selection and trigger == CLICK:
            request = self._viewport_for(geometry, anchor)
            if request is not None:
                self._request_viewport(request)

        self.selectionChanged.emit(self._state)
        return self._state

    def pointer_resolves_to_no_feature(self) -> SelectionState:
        """Clear the selection; the viewport is left where it is."""
        if not self._state.is_active:
            return self._state
        return self._clear("pointer")

    def dataset_replaced(self) -> SelectionState:
        """Drop any selection made against the previous dataset."""
        return self._clear("dataset replaced")

    # ---------- pointer handlers ----------
    def on_pointer_click(self, pixel: Pixel) -> SelectionState:
        return self._resolve(pixel, CLICK)

    def on_pointer_move(self, pixel: Pixel) -> SelectionState:
        """Hover handler; ignored unless the overlay trigger is "hover"."""
        if self.overlay_trigger != HOVER:
            return self._state
        return self._resolve(pixel, HOVER)

    def _resolve(self, pixel: Pixel, trigger: str) -> SelectionState:
        if self._caps.hit_test is None:
            logger.warning("No hit_test capability configured; ignoring %s at %s", trigger, pixel)
            return self._state

        ref = self._caps.hit_test(pixel)
        if ref is None:
            return self.pointer_resolves_to_no_feature()
        if trigger == HOVER and ref.feature_id == self._state.active_feature_id:
            # Still over the same feature
            return self._state
        return self.pointer_resolves_to_feature(
            ref.feature_id, ref.geometry, ref.properties, trigger=trigger
        )

    # ---------- side effects ----------
    def _clear(self, reason: str) -> SelectionState:
        was_visible = self._state.overlay_visible
        self._state = SelectionState()
        logger.debug("Selection cleared (%s)", reason)
        if was_visible:
            self._hide_overlay()
        self.selectionChanged.emit(self._state)
        return self._state

    def _anchor_for(self, geometry: Any) -> Optional[Coordinate]:
        try:
            return tuple(self._caps.interior_point(geometry))
        except (ValueError, TypeError, NotImplementedError) as e:
            logger.debug("Interior point unavailable (%s); using extent center", e)

        bbox = self._extent_of(geometry)
        if bbox is None:
            logger.warning("Cannot anchor overlay: geometry has no usable extent")
            return None
        return bbox.center

    def _extent_of(self, geometry: Any) -> Optional[BoundingBox]:
        try:
            return self._caps.extent(geometry)
        except (ValueError, TypeError, NotImplementedError) as e:
            logger.debug("Extent unavailable: %s", e)
            return None

    def _viewport_for(
        self, geometry: Any, anchor: Optional[Coordinate]
    ) -> Optional[ViewportRequest]:
        bbox = self._extent_of(geometry)
        center = anchor if anchor is not None else (bbox.center if bbox else None)
        if center is None:
            return None

        zoom = self._caps.zoom_for_extent(bbox) if bbox is not None else None
        if zoom is None:
            zoom = self.max_zoom
        else:
            zoom = min(zoom + self.zoom_padding, self.max_zoom)
        return ViewportRequest(center=center, zoom=zoom, duration_ms=self.animation_ms)

    def _show_overlay(self, anchor: Coordinate, properties: Mapping[str, Any]) -> None:
        content = self._caps.render_overlay(properties)
        if self._caps.set_overlay_content is not None:
            self._caps.set_overlay_content(content)
        if self._caps.set_overlay_position is not None:
            self._caps.set_overlay_position(anchor)
        self.overlayShown.emit(anchor, content)

    def _hide_overlay(self) -> None:
        if self._caps.set_overlay_position is not None:
            self._caps.set_overlay_position(None)
        self.overlayHidden.emit()

    def _request_viewport(self, request: ViewportRequest) -> None:
        self._last_viewport = request
        if self._caps.animate_viewport is not None:
            self._caps.animate_viewport(request.center, request.zoom, request.duration_ms)
        self.viewportRequested.emit(request)
