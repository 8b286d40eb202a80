"""Deep links that hand turn-by-turn directions to an external mapping provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import quote

from ...config import settings

NOT_ENOUGH_LOCATIONS = "Need at least two locations to build a route."


@dataclass(frozen=True, slots=True)
class RouteLink:
    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.url is not None


def _encode(value: str) -> str:
    return quote(value, safe="")


def build_link(addresses: Sequence[str], base_url: str | None = None) -> RouteLink:
    """Build a driving-directions link: first address is the origin, last the destination."""

    cleaned = [address.strip() for address in addresses if address and address.strip()]
    if len(cleaned) < 2:
        return RouteLink(error=NOT_ENOUGH_LOCATIONS)

    provider = (base_url or settings.directions_base_url).rstrip("/")
    params = [
        "api=1",
        f"origin={_encode(cleaned[0])}",
        f"destination={_encode(cleaned[-1])}",
    ]
    waypoints = cleaned[1:-1]
    if waypoints:
        params.append("waypoints=" + "|".join(_encode(waypoint) for waypoint in waypoints))
    params.append("travelmode=driving")
    return RouteLink(url=f"{provider}/dir/?{'&'.join(params)}")
