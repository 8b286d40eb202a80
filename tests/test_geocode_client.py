import asyncio

import httpx
import pytest

from src.contractor_kit.services.geocoding.batch import RateLimitedBatchResolver
from src.contractor_kit.services.geocoding.client import GeocodeClient, parse_first_result
from src.contractor_kit.services.routing.models import Coordinate, LabeledAddress


def _geocoder(handler, timeout: float = 8.0) -> GeocodeClient:
    transport = httpx.MockTransport(handler)
    return GeocodeClient(
        base_url="https://geo.test",
        timeout=timeout,
        user_agent="contractor-kit-tests",
        http_client=httpx.AsyncClient(transport=transport),
    )


def _resolve(handler, address: str, timeout: float = 8.0):
    async def run():
        async with _geocoder(handler, timeout=timeout) as client:
            return await client.resolve(address)

    return asyncio.run(run())


def test_resolve_returns_first_result():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"lat": "40.7128", "lon": "-74.0060", "display_name": "New York"},
                {"lat": "1.0", "lon": "1.0"},
            ],
        )

    result = _resolve(handler, "  New York, NY ")

    assert result == Coordinate(40.7128, -74.006)
    assert len(seen) == 1
    request = seen[0]
    assert request.url.path == "/search"
    assert request.url.params["q"] == "New York, NY"
    assert request.url.params["format"] == "json"
    assert request.headers["User-Agent"] == "contractor-kit-tests"


@pytest.mark.parametrize("address", ["", "   ", "\t\n"])
def test_blank_address_makes_no_request(address):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[{"lat": "1", "lon": "1"}])

    assert _resolve(handler, address) is None
    assert calls == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json=[{"lat": "40.0", "lon": "-74.0"}]),
        httpx.Response(404, text="not found"),
        httpx.Response(200, text="<html>busy</html>", headers={"content-type": "text/html"}),
        httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"}),
        httpx.Response(200, json=[]),
        httpx.Response(200, json={"lat": "40.0", "lon": "-74.0"}),
        httpx.Response(200, json=[{"lat": "nan", "lon": "-74.0"}]),
        httpx.Response(200, json=[{"lat": "40.0", "lon": "inf"}]),
        httpx.Response(200, json=[{"lat": "95.0", "lon": "-74.0"}]),
        httpx.Response(200, json=[{"lat": "north", "lon": "-74.0"}]),
        httpx.Response(200, json=[{"display_name": "no coordinates"}]),
    ],
)
def test_malformed_responses_resolve_to_none(response):
    assert _resolve(lambda request: response, "123 Main St") is None


def test_network_error_resolves_to_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert _resolve(handler, "123 Main St") is None


@pytest.mark.parametrize("address", ["12 Main St \ud800", "\udcff Oak Ave"])
def test_unencodable_address_resolves_to_none(address):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[{"lat": "1", "lon": "1"}])

    assert _resolve(handler, address) is None
    assert calls == []


def test_timeout_cancels_request_and_resolves_to_none():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json=[{"lat": "1", "lon": "1"}])

    assert _resolve(handler, "123 Main St", timeout=0.05) is None


def test_parse_first_result_ignores_non_object_entries():
    assert parse_first_result(["40.0,-74.0"]) is None
    assert parse_first_result([{"lat": 12.5, "lon": 99}]) == Coordinate(12.5, 99.0)


def test_unencodable_address_is_skipped_not_fatal_in_batch():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"lat": "40.0", "lon": "-74.0"}])

    async def run():
        async with _geocoder(handler) as client:
            batch = RateLimitedBatchResolver(client, spacing=0)
            return await batch.resolve_all(
                [
                    LabeledAddress("Start", "1 Home St"),
                    LabeledAddress("Broken", "12 Main St \ud800"),
                    LabeledAddress("End", "2 Oak Ave"),
                ]
            )

    result = asyncio.run(run())

    assert result.failure_count == 1
    assert [stop.label for stop in result.stops] == ["Start", "End"]
