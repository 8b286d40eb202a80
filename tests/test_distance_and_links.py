import math

import pytest

from src.contractor_kit.services.geospatial import EARTH_RADIUS_MILES, haversine_miles
from src.contractor_kit.services.routing.distance import total_distance, total_distance_miles
from src.contractor_kit.services.routing.links import NOT_ENOUGH_LOCATIONS, build_link
from src.contractor_kit.services.routing.models import Coordinate, RouteStop

PROVIDER = "https://maps.example.com"


def _stop(lat: float, lon: float, label: str = "Stop") -> RouteStop:
    return RouteStop(coordinate=Coordinate(lat, lon), label=label)


def test_fewer_than_two_stops_is_zero():
    assert total_distance([]) == "0.00"
    assert total_distance([_stop(40.0, -74.0)]) == "0.00"


def test_identical_stops_are_zero():
    assert total_distance([_stop(40.0, -74.0), _stop(40.0, -74.0)]) == "0.00"


def test_one_mile_along_a_meridian():
    one_mile_in_degrees = math.degrees(1 / EARTH_RADIUS_MILES)
    stops = [_stop(40.0, -74.0), _stop(40.0 + one_mile_in_degrees, -74.0)]

    assert total_distance_miles(stops) == pytest.approx(1.0, abs=1e-9)
    assert total_distance(stops) == "1.00"


def test_new_york_to_los_angeles_reference_distance():
    stops = [_stop(40.7128, -74.0060), _stop(34.0522, -118.2437)]

    assert total_distance_miles(stops) == pytest.approx(2445.6, abs=5.0)


def test_three_stops_sum_consecutive_segments():
    a, b, c = (40.0, -74.0), (40.05, -74.02), (40.1, -74.05)
    stops = [_stop(*a), _stop(*b), _stop(*c)]

    expected = haversine_miles(*a, *b) + haversine_miles(*b, *c)
    assert total_distance_miles(stops) == pytest.approx(expected, rel=1e-12)
    assert total_distance(stops) == f"{expected:.2f}"


def test_distance_follows_list_order():
    a, b, c = _stop(40.0, -74.0), _stop(41.0, -74.0), _stop(40.5, -74.0)

    assert total_distance_miles([a, b, c]) > total_distance_miles([a, c, b])


@pytest.mark.parametrize("addresses", [[], ["Only one"], ["  ", "123 Main St"], ["", ""]])
def test_link_requires_two_locations(addresses):
    result = build_link(addresses, base_url=PROVIDER)

    assert not result.ok
    assert result.url is None
    assert result.error == NOT_ENOUGH_LOCATIONS


def test_link_with_two_addresses_has_no_waypoints():
    result = build_link(["123 Main St", "456 Oak Ave"], base_url=PROVIDER)

    assert result.ok
    assert result.url == (
        "https://maps.example.com/dir/?api=1"
        "&origin=123%20Main%20St"
        "&destination=456%20Oak%20Ave"
        "&travelmode=driving"
    )
    assert "waypoints" not in result.url


def test_link_with_four_addresses_keeps_waypoint_order():
    result = build_link(["1 First St", "B & C Plaza", "Unit 4/5 Dock Rd", "9 Last Ln"], base_url=PROVIDER + "/")

    assert result.url == (
        "https://maps.example.com/dir/?api=1"
        "&origin=1%20First%20St"
        "&destination=9%20Last%20Ln"
        "&waypoints=B%20%26%20C%20Plaza|Unit%204%2F5%20Dock%20Rd"
        "&travelmode=driving"
    )
    waypoints = result.url.split("waypoints=")[1].split("&")[0]
    assert len(waypoints.split("|")) == 2
