from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class GeoCoordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Location:
    location_id: str
    name: str
    coordinates: GeoCoordinates


@dataclass(frozen=True)
class OutletDevice:
    device_id: str
    name: str
    on: Optional[bool] = None  # last state reported by the platform


@dataclass(frozen=True)
class Camera:
    device_id: str
    name: str
    night_mode: Optional[bool] = None  # None = camera doesn't report it


@dataclass(frozen=True)
class SunTimes:
    sunrise: datetime
    sunset: datetime


@dataclass(frozen=True)
class SunWindow:
    valid_for_day: date
    sunrise: datetime
    sunset: datetime

    def is_night(self, now: datetime) -> bool:
        return now < self.sunrise or now > self.sunset


@dataclass(frozen=True)
class CycleDecision:
    action: str  # "ON" | "OFF" | "NOOP" | "SKIPPED"
    reason: str
    armed: Optional[bool] = None
    night: Optional[bool] = None
    changed: bool = False
