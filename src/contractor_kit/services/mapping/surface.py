"""Declarative marker and route-line rendering on top of a stateful map widget."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ...config import settings
from ..routing.models import Coordinate
from .widget import LngLat, MapWidget, MarkerHandle, StyleDocumentWidget, WidgetFactory

logger = logging.getLogger(__name__)

ROUTE_SOURCE_ID = "route"
ROUTE_LAYER_ID = "route-layer"
ROUTE_LINE_PAINT = {"line-color": "#0074D9", "line-width": 4}


class SurfaceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class MapMarker:
    coordinate: Coordinate
    popup_text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class FeatureRequest:
    markers: tuple[MapMarker, ...] = ()
    line: Optional[tuple[Coordinate, ...]] = None


EMPTY_FEATURES = FeatureRequest()


def _lnglat(coordinate: Coordinate) -> LngLat:
    return (coordinate.longitude, coordinate.latitude)


def _route_source(line: Sequence[Coordinate]) -> dict:
    return {
        "type": "geojson",
        "data": {
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [list(_lnglat(point)) for point in line],
            },
            "properties": {},
        },
    }


class MapSurface:
    """Owns one map widget and keeps it in sync with the latest requested features.

    Lifecycle: UNINITIALIZED -> (mount) -> INITIALIZING -> (style load) -> READY,
    and back to UNINITIALIZED on ``unmount``. Feature requests made before the
    widget is ready sit in a single pending slot; a newer request replaces an
    older one and only the newest is applied when the style finishes loading.
    """

    def __init__(self, widget_factory: WidgetFactory | None = None) -> None:
        self._widget_factory = widget_factory or StyleDocumentWidget
        self._widget: MapWidget | None = None
        self._state = SurfaceState.UNINITIALIZED
        self._view: tuple[str, Coordinate, float] | None = None
        self._pending: FeatureRequest | None = None
        self._desired: FeatureRequest = EMPTY_FEATURES
        self._markers: list[MarkerHandle] = []
        self._ready_waiters: list[asyncio.Future] = []

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def widget(self) -> MapWidget | None:
        return self._widget

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def mount(self, center: Coordinate, zoom: float | None = None, tile_url: str | None = None) -> MapWidget:
        """Create the widget, or rebuild it when center, zoom or tile source changed."""

        view = (
            tile_url or settings.map_tile_url,
            center,
            zoom if zoom is not None else settings.map_default_zoom,
        )
        if self._widget is not None:
            if view == self._view:
                return self._widget
            logger.debug("Map view configuration changed; rebuilding widget")
            self._teardown()

        tile, view_center, view_zoom = view
        widget = self._widget_factory(tile, _lnglat(view_center), view_zoom)
        self._widget = widget
        self._view = view
        self._state = SurfaceState.INITIALIZING
        # whatever was last requested is redrawn on the new widget
        self._pending = self._desired

        if widget.is_style_loaded():
            self._handle_load(widget)
        else:
            widget.once("load", lambda: self._handle_load(widget))
        return widget

    def reinitialize(self, center: Coordinate, zoom: float | None = None, tile_url: str | None = None) -> MapWidget:
        return self.mount(center, zoom=zoom, tile_url=tile_url)

    def set_view(self, center: Coordinate, zoom: float | None = None) -> bool:
        """Move a READY widget. Returns False when the widget cannot take it yet."""

        if self._state is not SurfaceState.READY or self._widget is None:
            return False
        tile, _, current_zoom = self._view
        new_zoom = zoom if zoom is not None else current_zoom
        self._widget.set_view(_lnglat(center), new_zoom)
        self._view = (tile, center, new_zoom)
        return True

    def apply_features(
        self,
        markers: Sequence[MapMarker] = (),
        line: Optional[Sequence[Coordinate]] = None,
    ) -> bool:
        """Replace all markers and the route line. Returns True if applied right away."""

        request = FeatureRequest(
            markers=tuple(markers),
            line=tuple(line) if line is not None else None,
        )
        self._desired = request

        widget = self._widget
        if widget is None:
            return False
        if self._state is not SurfaceState.READY or not widget.is_style_loaded():
            if self._pending is not None:
                logger.debug("Replacing pending map update")
            self._pending = request
            return False

        self._apply(widget, request)
        return True

    def clear(self) -> bool:
        return self.apply_features((), None)

    def unmount(self) -> None:
        self._teardown()
        self._desired = EMPTY_FEATURES

    async def wait_until_ready(self, timeout: float | None = None) -> bool:
        if self._widget is None:
            return False
        if self._state is SurfaceState.READY:
            return True
        waiter = asyncio.get_running_loop().create_future()
        self._ready_waiters.append(waiter)
        try:
            await asyncio.wait_for(waiter, timeout=timeout)
        except asyncio.TimeoutError:
            return False
        finally:
            if waiter in self._ready_waiters:
                self._ready_waiters.remove(waiter)
        return self._state is SurfaceState.READY

    def _wake_waiters(self) -> None:
        waiters, self._ready_waiters = self._ready_waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    def _handle_load(self, widget: MapWidget) -> None:
        if widget is not self._widget:
            # load event from a widget that has since been replaced
            return
        self._state = SurfaceState.READY
        pending, self._pending = self._pending, None
        if pending is not None:
            self._apply(widget, pending)
        self._wake_waiters()

    def _remove_features(self, widget: MapWidget) -> None:
        for handle in self._markers:
            handle.remove()
        self._markers = []
        if widget.is_style_loaded():
            if widget.get_layer(ROUTE_LAYER_ID) is not None:
                widget.remove_layer(ROUTE_LAYER_ID)
            if widget.get_source(ROUTE_SOURCE_ID) is not None:
                widget.remove_source(ROUTE_SOURCE_ID)

    def _apply(self, widget: MapWidget, request: FeatureRequest) -> None:
        self._remove_features(widget)

        for marker in request.markers:
            self._markers.append(widget.add_marker(_lnglat(marker.coordinate), marker.popup_text))

        # a LineString needs at least two positions
        if request.line is not None and len(request.line) >= 2:
            widget.add_source(ROUTE_SOURCE_ID, _route_source(request.line))
            widget.add_layer(
                {
                    "id": ROUTE_LAYER_ID,
                    "type": "line",
                    "source": ROUTE_SOURCE_ID,
                    "paint": dict(ROUTE_LINE_PAINT),
                }
            )
        logger.debug(f"Applied {len(request.markers)} markers to map")

    def _teardown(self) -> None:
        widget = self._widget
        if widget is not None:
            self._remove_features(widget)
            widget.remove()
        self._widget = None
        self._view = None
        self._pending = None
        self._markers = []
        self._state = SurfaceState.UNINITIALIZED
        # waiters see a non-READY state and report False
        self._wake_waiters()
