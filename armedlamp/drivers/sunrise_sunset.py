from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

import httpx

from ..domain.models import Location, SunTimes

logger = logging.getLogger(__name__)


class SunriseSunsetError(RuntimeError):
    pass


def _parse_instant(value: str) -> datetime:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class SunriseSunsetClient:
    """Client for the sunrise-sunset.org JSON API (``formatted=0`` = ISO-8601, UTC)."""

    def __init__(
        self,
        base_url: str = "https://api.sunrise-sunset.org/json",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, location: Location, day: date) -> SunTimes:
        params = {
            "lat": location.coordinates.latitude,
            "lng": location.coordinates.longitude,
            "date": day.isoformat(),
            "formatted": 0,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(self._base_url, params=params)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError:
            logger.error("Error getting sunrise-sunset for %s", location.name, exc_info=True)
            raise
        except ValueError as e:
            logger.error("Non-JSON sunrise-sunset response for %s", location.name)
            raise SunriseSunsetError(f"sunrise-sunset response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise SunriseSunsetError(f"Malformed sunrise-sunset payload: expected an object, got {type(data).__name__}")

        status = data.get("status")
        if status != "OK":
            raise SunriseSunsetError(f"sunrise-sunset status {status!r} for {day.isoformat()}")

        try:
            results = data["results"]
            times = SunTimes(
                sunrise=_parse_instant(results["sunrise"]),
                sunset=_parse_instant(results["sunset"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SunriseSunsetError(f"Malformed sunrise-sunset payload: {e}") from e

        logger.info(
            "Sun times for %s on %s: sunrise=%s sunset=%s",
            location.name, day.isoformat(), times.sunrise.isoformat(), times.sunset.isoformat(),
        )
        return times
