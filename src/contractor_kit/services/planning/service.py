"""Route planning orchestration service."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal, Optional, Sequence

from ...models.domain import Appointment, Client, RouteSettings
from ..geocoding.batch import RateLimitedBatchResolver
from ..geocoding.client import GeocodeClient
from ..geospatial import bounding_box
from ..mapping.surface import MapMarker, MapSurface
from ..routing.distance import DISTANCE_NOTE, total_distance, total_distance_miles
from ..routing.links import NOT_ENOUGH_LOCATIONS
from ..routing.models import BatchResult, LabeledAddress, RouteStopList
from .stops import build_labeled_addresses

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Route planning failed. Please try again."
NO_LOCATIONS_FOUND = "None of today's locations could be found on the map."

NoticeLevel = Literal["success", "warning", "error"]
OutcomeStatus = Literal["ok", "partial", "failed", "cancelled"]


class InsufficientLocationsError(ValueError):
    """Fewer than two usable addresses; raised before any lookup starts."""

    def __init__(self, message: str = NOT_ENOUGH_LOCATIONS) -> None:
        super().__init__(message)


@dataclass(slots=True)
class Notice:
    level: NoticeLevel
    message: str


@dataclass(slots=True)
class PlanningOutcome:
    status: OutcomeStatus
    stops: RouteStopList = ()
    failure_count: int = 0
    distance_miles: str = "0.00"
    notices: list[Notice] = field(default_factory=list)
    bounds: dict[str, float] = field(default_factory=dict)
    addresses: list[LabeledAddress] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status in ("ok", "partial")

    @property
    def distance_value(self) -> float:
        return total_distance_miles(self.stops)

    def summary(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "stop_count": len(self.stops),
            "failure_count": self.failure_count,
            "distance_miles": self.distance_miles,
        }


class RoutePlanner:
    """Plans the day's route: geocode in order, estimate distance, draw the map.

    One planner serves one user session. Starting a new run while another is
    still resolving cancels the older run; only the newest run updates the map.
    """

    def __init__(
        self,
        batch_resolver: RateLimitedBatchResolver,
        surface: MapSurface | None = None,
        zoom: float | None = None,
    ) -> None:
        self.batch_resolver = batch_resolver
        self.surface = surface or MapSurface()
        self.zoom = zoom
        self._inflight: asyncio.Task | None = None
        self.last_outcome: PlanningOutcome | None = None

    @property
    def is_loading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def plan_route(
        self,
        appointments: Sequence[Appointment],
        clients: Sequence[Client],
        route_settings: RouteSettings | None = None,
        today: date | None = None,
    ) -> PlanningOutcome:
        today = today or date.today()
        labeled = build_labeled_addresses(appointments, clients, route_settings, today)
        if len(labeled) < 2:
            raise InsufficientLocationsError()
        return await self.plan_addresses(labeled)

    async def plan_addresses(self, labeled: Sequence[LabeledAddress]) -> PlanningOutcome:
        labeled = list(labeled)
        if len(labeled) < 2:
            raise InsufficientLocationsError()

        previous = self._inflight
        if previous is not None and not previous.done():
            logger.info("Cancelling in-flight route planning run in favour of a new one")
            previous.cancel()

        task = asyncio.ensure_future(self.batch_resolver.resolve_all(labeled))
        self._inflight = task
        logger.info(f"Planning route through {len(labeled)} locations")

        try:
            result = await task
        except asyncio.CancelledError:
            if self._inflight is task:
                # the caller itself was cancelled
                raise
            logger.info("Route planning run superseded by a newer request")
            return PlanningOutcome(status="cancelled", addresses=labeled)
        except Exception:
            logger.exception("Unexpected error while resolving route addresses")
            outcome = PlanningOutcome(
                status="failed",
                notices=[Notice("error", GENERIC_FAILURE)],
                addresses=labeled,
            )
            self._render(outcome)
            self.last_outcome = outcome
            return outcome
        finally:
            if self._inflight is task:
                self._inflight = None

        outcome = self._build_outcome(result, labeled)
        logger.info(f"Route planning finished: {outcome.summary()}")
        self._render(outcome)
        self.last_outcome = outcome
        return outcome

    def _build_outcome(self, result: BatchResult, labeled: list[LabeledAddress]) -> PlanningOutcome:
        if not result.stops:
            logger.warning(f"No addresses resolved out of {len(labeled)}")
            return PlanningOutcome(
                status="failed",
                failure_count=result.failure_count,
                notices=[Notice("error", NO_LOCATIONS_FOUND)],
                addresses=labeled,
            )

        distance = total_distance(result.stops)
        notices: list[Notice] = []
        if result.failure_count:
            noun = "location" if result.failure_count == 1 else "locations"
            notices.append(
                Notice("warning", f"{result.failure_count} {noun} could not be found and were skipped.")
            )
        notices.append(
            Notice("success", f"Route planned with {len(result.stops)} stops: {distance} mi. {DISTANCE_NOTE}")
        )
        return PlanningOutcome(
            status="partial" if result.failure_count else "ok",
            stops=result.stops,
            failure_count=result.failure_count,
            distance_miles=distance,
            notices=notices,
            bounds=bounding_box(stop.coordinate.as_pair() for stop in result.stops),
            addresses=labeled,
        )

    def _render(self, outcome: PlanningOutcome) -> None:
        surface = self.surface
        if not outcome.stops:
            surface.clear()
            return

        center = outcome.stops[0].coordinate
        if not surface.set_view(center, self.zoom):
            surface.mount(center, zoom=self.zoom)
        surface.apply_features(
            markers=[MapMarker(stop.coordinate, stop.label) for stop in outcome.stops],
            line=[stop.coordinate for stop in outcome.stops],
        )

    async def map_document(self, timeout: float = 1.0) -> Optional[dict[str, Any]]:
        """Serialized map state once the widget is ready, if it can produce one."""

        if not await self.surface.wait_until_ready(timeout=timeout):
            return None
        to_document = getattr(self.surface.widget, "to_document", None)
        return to_document() if to_document is not None else None

    async def aclose(self) -> None:
        if self.is_loading:
            self._inflight.cancel()
        self.surface.unmount()
        resolver = getattr(self.batch_resolver, "resolver", None)
        if isinstance(resolver, GeocodeClient):
            await resolver.aclose()


def build_route_planner(geocode_client: GeocodeClient | None = None) -> RoutePlanner:
    """Planner wired with the configured geocoder, spacing and map defaults."""

    client = geocode_client or GeocodeClient()
    return RoutePlanner(RateLimitedBatchResolver(client))
