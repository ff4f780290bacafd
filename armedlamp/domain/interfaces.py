from __future__ import annotations
from datetime import date
from typing import Protocol, runtime_checkable
from .models import Camera, Location, OutletDevice, SunTimes


@runtime_checkable
class SecurityPlatform(Protocol):
    async def get_locations(self) -> list[Location]:
        ...

    async def get_outlets(self, location: Location) -> list[OutletDevice]:
        ...

    async def get_cameras(self, location: Location) -> list[Camera]:
        ...

    async def get_location_mode(self, location: Location) -> str:
        ...

    async def set_outlet(self, device: OutletDevice, on: bool) -> None:
        ...


@runtime_checkable
class SunTimesProvider(Protocol):
    async def fetch(self, location: Location, day: date) -> SunTimes:
        ...
