import asyncio

import pytest

from src.contractor_kit.services.geocoding.batch import RateLimitedBatchResolver, RequestSpacer
from src.contractor_kit.services.routing.models import Coordinate, LabeledAddress


class RecordingResolver:
    """Looks addresses up in a dict and records call order and overlap."""

    def __init__(self, known: dict[str, Coordinate], events: list):
        self.known = known
        self.events = events
        self.in_flight = 0
        self.max_in_flight = 0

    async def resolve(self, address: str):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.events.append(("resolve", address))
        await asyncio.sleep(0)
        self.in_flight -= 1
        return self.known.get(address)


def _recording_sleep(events: list):
    async def sleep(seconds: float) -> None:
        events.append(("sleep", seconds))

    return sleep


KNOWN = {
    "A": Coordinate(40.0, -74.0),
    "B": Coordinate(40.1, -74.1),
    "D": Coordinate(40.3, -74.3),
}


def _labeled(*addresses: str) -> list[LabeledAddress]:
    return [LabeledAddress(label=f"Client {address}", address=address) for address in addresses]


def test_resolve_all_is_sequential_with_spacing_between_calls():
    events: list = []
    resolver = RecordingResolver(KNOWN, events)
    batch = RateLimitedBatchResolver(resolver, spacing=0.8, sleep=_recording_sleep(events))

    result = asyncio.run(batch.resolve_all(_labeled("A", "B", "D")))

    assert events == [
        ("resolve", "A"),
        ("sleep", 0.8),
        ("resolve", "B"),
        ("sleep", 0.8),
        ("resolve", "D"),
    ]
    assert resolver.max_in_flight == 1
    assert result.failure_count == 0
    assert [stop.label for stop in result.stops] == ["Client A", "Client B", "Client D"]


def test_failures_are_counted_and_skipped_in_order():
    events: list = []
    resolver = RecordingResolver(KNOWN, events)
    batch = RateLimitedBatchResolver(resolver, spacing=0.8, sleep=_recording_sleep(events))

    result = asyncio.run(batch.resolve_all(_labeled("A", "missing", "D", "nowhere")))

    assert [event for event in events if event[0] == "resolve"] == [
        ("resolve", "A"),
        ("resolve", "missing"),
        ("resolve", "D"),
        ("resolve", "nowhere"),
    ]
    assert events.count(("sleep", 0.8)) == 3
    assert result.failure_count == 2
    assert len(result.stops) == 4 - 2
    assert [stop.coordinate for stop in result.stops] == [KNOWN["A"], KNOWN["D"]]
    assert result.attempted == 4


def test_total_failure_is_reported_as_data():
    events: list = []
    batch = RateLimitedBatchResolver(RecordingResolver({}, events), spacing=0.8, sleep=_recording_sleep(events))

    result = asyncio.run(batch.resolve_all(_labeled("x", "y")))

    assert result.stops == ()
    assert result.failure_count == 2


def test_single_item_never_sleeps():
    events: list = []
    batch = RateLimitedBatchResolver(RecordingResolver(KNOWN, events), spacing=0.8, sleep=_recording_sleep(events))

    asyncio.run(batch.resolve_all(_labeled("A")))

    assert events == [("resolve", "A")]


def test_request_spacer_rejects_negative_spacing():
    with pytest.raises(ValueError):
        RequestSpacer(-1)


def test_request_spacer_waits_after_first_call_until_reset():
    events: list = []
    spacer = RequestSpacer(0.5, sleep=_recording_sleep(events))

    async def run():
        await spacer.wait()
        await spacer.wait()
        spacer.reset()
        await spacer.wait()

    asyncio.run(run())

    assert events == [("sleep", 0.5)]
