"""Shared fixtures: a settable clock, a simulated platform and canned sun times."""
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from armedlamp.domain.models import SunTimes
from armedlamp.drivers.platform_sim import SimulatedSecurityPlatform


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FakeClock(utc(2024, 6, 1, 2, 0))


@pytest.fixture
def sun_fetcher():
    # sunrise 11:00, sunset 23:00 UTC, for whatever day is asked
    async def fetch(location, day):
        return SunTimes(
            sunrise=datetime(day.year, day.month, day.day, 11, 0, tzinfo=timezone.utc),
            sunset=datetime(day.year, day.month, day.day, 23, 0, tzinfo=timezone.utc),
        )

    fetcher = AsyncMock()
    fetcher.fetch = AsyncMock(side_effect=fetch)
    return fetcher


@pytest.fixture
def platform():
    return SimulatedSecurityPlatform(
        location_name="Home",
        latitude=47.6,
        longitude=-122.3,
        outlet_names=("Outlet Switch 1", "Porch"),
        camera_names=("Front Door",),
    )
