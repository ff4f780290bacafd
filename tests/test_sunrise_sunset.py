import json
from datetime import date

import httpx
import pytest

from armedlamp.domain.models import GeoCoordinates, Location
from armedlamp.drivers.sunrise_sunset import SunriseSunsetClient, SunriseSunsetError

from conftest import utc

LOCATION = Location("loc_1", "Home", GeoCoordinates(47.6062, -122.3321))
DAY = date(2024, 6, 1)


def client_for(handler):
    return SunriseSunsetClient(
        base_url="https://api.sunrise-sunset.org/json",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_parses_iso_instants_and_sends_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={
            "results": {
                "sunrise": "2024-06-01T12:12:05+00:00",
                "sunset": "2024-06-02T04:03:31+00:00",
            },
            "status": "OK",
        })

    times = await client_for(handler).fetch(LOCATION, DAY)

    assert times.sunrise == utc(2024, 6, 1, 12, 12, 5)
    assert times.sunset == utc(2024, 6, 2, 4, 3, 31)
    assert seen["params"] == {
        "lat": "47.6062",
        "lng": "-122.3321",
        "date": "2024-06-01",
        "formatted": "0",
    }


@pytest.mark.asyncio
async def test_fetch_accepts_z_suffix():
    def handler(request):
        return httpx.Response(200, json={
            "results": {"sunrise": "2024-06-01T11:00:00Z", "sunset": "2024-06-01T23:00:00Z"},
            "status": "OK",
        })

    times = await client_for(handler).fetch(LOCATION, DAY)

    assert times.sunrise == utc(2024, 6, 1, 11, 0)
    assert times.sunset.tzinfo is not None


@pytest.mark.asyncio
async def test_non_ok_status_raises():
    def handler(request):
        return httpx.Response(200, json={"results": "", "status": "INVALID_REQUEST"})

    with pytest.raises(SunriseSunsetError, match="INVALID_REQUEST"):
        await client_for(handler).fetch(LOCATION, DAY)


@pytest.mark.asyncio
async def test_malformed_payload_raises():
    def handler(request):
        return httpx.Response(200, json={"results": {"sunrise": "soon"}, "status": "OK"})

    with pytest.raises(SunriseSunsetError):
        await client_for(handler).fetch(LOCATION, DAY)


@pytest.mark.asyncio
async def test_http_error_propagates():
    def handler(request):
        return httpx.Response(503, content=json.dumps({"status": "UNKNOWN_ERROR"}))

    with pytest.raises(httpx.HTTPStatusError):
        await client_for(handler).fetch(LOCATION, DAY)


@pytest.mark.asyncio
async def test_non_json_body_raises():
    def handler(request):
        return httpx.Response(200, content=b"<html>gateway</html>")

    with pytest.raises(SunriseSunsetError, match="not JSON"):
        await client_for(handler).fetch(LOCATION, DAY)


@pytest.mark.asyncio
async def test_json_array_body_raises():
    def handler(request):
        return httpx.Response(200, content=b"[1, 2]")

    with pytest.raises(SunriseSunsetError, match="expected an object"):
        await client_for(handler).fetch(LOCATION, DAY)
