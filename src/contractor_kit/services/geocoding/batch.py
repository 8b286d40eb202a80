"""Sequential, rate-limited resolution of labelled addresses."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Iterable, Protocol

from ...config import settings
from ..routing.models import BatchResult, Coordinate, LabeledAddress, RouteStop

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class AddressResolver(Protocol):
    async def resolve(self, address: str) -> Coordinate | None: ...


class RequestSpacer:
    """Keeps consecutive requests at least ``spacing`` seconds apart.

    The first call to ``wait`` returns immediately; each later call sleeps the
    full spacing before the caller issues its next request. One instance
    serves one ordered sequence of requests.
    """

    def __init__(self, spacing: float, sleep: Sleep | None = None) -> None:
        if spacing < 0:
            raise ValueError("spacing must be non-negative")
        self.spacing = spacing
        self._sleep = sleep or asyncio.sleep
        self._started = False

    async def wait(self) -> None:
        if self._started and self.spacing > 0:
            await self._sleep(self.spacing)
        self._started = True

    def reset(self) -> None:
        self._started = False


class RateLimitedBatchResolver:
    """Resolves addresses strictly in order, one lookup in flight at a time."""

    def __init__(
        self,
        resolver: AddressResolver,
        spacing: float | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self.resolver = resolver
        self.spacing = spacing if spacing is not None else settings.geocode_spacing_seconds
        self._sleep = sleep

    async def resolve_all(self, labeled_addresses: Iterable[LabeledAddress]) -> BatchResult:
        spacer = RequestSpacer(self.spacing, sleep=self._sleep)
        stops: list[RouteStop] = []
        failure_count = 0
        start_time = time.monotonic()

        for item in labeled_addresses:
            await spacer.wait()
            coordinate = await self.resolver.resolve(item.address)
            if coordinate is None:
                failure_count += 1
                logger.warning(f"Skipping {item.label!r}: could not locate {item.address!r}")
                continue
            stops.append(RouteStop(coordinate=coordinate, label=item.label))

        duration = time.monotonic() - start_time
        logger.info(
            f"Resolved {len(stops)}/{len(stops) + failure_count} addresses in {duration:.2f}s "
            f"({failure_count} skipped)"
        )
        return BatchResult(stops=tuple(stops), failure_count=failure_count)
