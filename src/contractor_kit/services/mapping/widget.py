"""Map widget interface and an in-memory MapLibre style document implementation."""

from __future__ import annotations

import asyncio
import copy
import itertools
import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

LngLat = tuple[float, float]
Listener = Callable[[], None]

RASTER_SOURCE_ID = "osm"
OSM_ATTRIBUTION = "&copy; OpenStreetMap contributors"


class MarkerHandle(Protocol):
    def remove(self) -> None: ...


class MapWidget(Protocol):
    """The slice of a map library the map surface depends on.

    Positions are ``(lng, lat)`` as the map library expects. Adding a source or
    layer before the style has loaded is not allowed.
    """

    def is_style_loaded(self) -> bool: ...

    def once(self, event: str, listener: Listener) -> None: ...

    def add_source(self, source_id: str, definition: dict[str, Any]) -> None: ...

    def remove_source(self, source_id: str) -> None: ...

    def get_source(self, source_id: str) -> Optional[dict[str, Any]]: ...

    def add_layer(self, definition: dict[str, Any]) -> None: ...

    def remove_layer(self, layer_id: str) -> None: ...

    def get_layer(self, layer_id: str) -> Optional[dict[str, Any]]: ...

    def add_marker(self, position: LngLat, popup_text: Optional[str] = None) -> MarkerHandle: ...

    def set_view(self, center: LngLat, zoom: float) -> None: ...

    def remove(self) -> None: ...


WidgetFactory = Callable[[str, LngLat, float], MapWidget]


def raster_style(tile_url: str) -> dict[str, Any]:
    """Build a version 8 style with a single raster tile source."""

    return {
        "version": 8,
        "sources": {
            RASTER_SOURCE_ID: {
                "type": "raster",
                "tiles": [tile_url],
                "tileSize": 256,
                "attribution": OSM_ATTRIBUTION,
            }
        },
        "layers": [{"id": RASTER_SOURCE_ID, "type": "raster", "source": RASTER_SOURCE_ID}],
    }


class DocumentMarker:
    def __init__(self, widget: "StyleDocumentWidget", marker_id: int, position: LngLat, popup_text: Optional[str]):
        self._widget = widget
        self.marker_id = marker_id
        self.position = position
        self.popup_text = popup_text

    def remove(self) -> None:
        self._widget._markers.pop(self.marker_id, None)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"lngLat": list(self.position)}
        if self.popup_text:
            payload["popup"] = self.popup_text
        return payload


class StyleDocumentWidget:
    """Holds a live MapLibre style document that a browser can render as-is.

    The style counts as loaded once ``mark_style_loaded`` runs. When created
    inside a running event loop that happens on the next loop iteration, the
    same way a browser map fires ``load`` after construction.
    """

    def __init__(self, tile_url: str, center: LngLat, zoom: float) -> None:
        self.tile_url = tile_url
        self.center = center
        self.zoom = zoom
        self._style = raster_style(tile_url)
        self._loaded = False
        self._removed = False
        self._listeners: dict[str, list[Listener]] = {}
        self._markers: dict[int, DocumentMarker] = {}
        self._marker_ids = itertools.count(1)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            loop.call_soon(self.mark_style_loaded)

    def _ensure_alive(self) -> None:
        if self._removed:
            raise RuntimeError("Map widget has been removed.")

    def _ensure_loaded(self) -> None:
        self._ensure_alive()
        if not self._loaded:
            raise RuntimeError("Style is not done loading.")

    def is_style_loaded(self) -> bool:
        return self._loaded and not self._removed

    def once(self, event: str, listener: Listener) -> None:
        self._ensure_alive()
        self._listeners.setdefault(event, []).append(listener)

    def mark_style_loaded(self) -> None:
        if self._removed or self._loaded:
            return
        self._loaded = True
        for listener in self._listeners.pop("load", []):
            listener()

    def add_source(self, source_id: str, definition: dict[str, Any]) -> None:
        self._ensure_loaded()
        if source_id in self._style["sources"]:
            raise ValueError(f"There is already a source with ID '{source_id}'.")
        self._style["sources"][source_id] = copy.deepcopy(definition)

    def remove_source(self, source_id: str) -> None:
        self._ensure_loaded()
        if any(layer.get("source") == source_id for layer in self._style["layers"]):
            raise ValueError(f"Source '{source_id}' cannot be removed while a layer is using it.")
        self._style["sources"].pop(source_id, None)

    def get_source(self, source_id: str) -> Optional[dict[str, Any]]:
        return self._style["sources"].get(source_id)

    def add_layer(self, definition: dict[str, Any]) -> None:
        self._ensure_loaded()
        layer_id = definition["id"]
        if self.get_layer(layer_id) is not None:
            raise ValueError(f"Layer with ID '{layer_id}' already exists on this map.")
        if definition.get("source") not in self._style["sources"]:
            raise ValueError(f"Layer '{layer_id}' references unknown source '{definition.get('source')}'.")
        self._style["layers"].append(copy.deepcopy(definition))

    def remove_layer(self, layer_id: str) -> None:
        self._ensure_loaded()
        self._style["layers"] = [layer for layer in self._style["layers"] if layer["id"] != layer_id]

    def get_layer(self, layer_id: str) -> Optional[dict[str, Any]]:
        for layer in self._style["layers"]:
            if layer["id"] == layer_id:
                return layer
        return None

    def add_marker(self, position: LngLat, popup_text: Optional[str] = None) -> DocumentMarker:
        self._ensure_alive()
        marker = DocumentMarker(self, next(self._marker_ids), position, popup_text)
        self._markers[marker.marker_id] = marker
        return marker

    def set_view(self, center: LngLat, zoom: float) -> None:
        self._ensure_alive()
        self.center = center
        self.zoom = zoom

    def remove(self) -> None:
        if self._removed:
            return
        self._removed = True
        self._listeners.clear()
        self._markers.clear()
        logger.debug("Map widget removed")

    @property
    def markers(self) -> list[DocumentMarker]:
        return list(self._markers.values())

    @property
    def removed(self) -> bool:
        return self._removed

    def to_document(self) -> dict[str, Any]:
        return {
            "style": copy.deepcopy(self._style),
            "center": list(self.center),
            "zoom": self.zoom,
            "markers": [marker.to_dict() for marker in self._markers.values()],
        }
