"""Map rendering services."""

from .surface import MapMarker, MapSurface, SurfaceState
from .widget import MapWidget, StyleDocumentWidget

__all__ = ["MapMarker", "MapSurface", "MapWidget", "StyleDocumentWidget", "SurfaceState"]
