from __future__ import annotations
import logging
from dataclasses import replace
from typing import Optional

from ..domain.models import Camera, GeoCoordinates, Location, OutletDevice

logger = logging.getLogger(__name__)

MODES = ("away", "home", "disarmed")


class SimulatedSecurityPlatform:
    """One location with outlets and cameras held in memory."""

    platform_id = "platform_sim"

    def __init__(
        self,
        location_name: str = "Home",
        latitude: float = 0.0,
        longitude: float = 0.0,
        outlet_names: tuple[str, ...] = ("Outlet Switch 1",),
        camera_names: tuple[str, ...] = (),
    ) -> None:
        self._location = Location(
            location_id="loc_sim_01",
            name=location_name,
            coordinates=GeoCoordinates(latitude=latitude, longitude=longitude),
        )
        self._mode = "disarmed"
        self._outlets: dict[str, OutletDevice] = {
            f"outlet_sim_{i + 1:02d}": OutletDevice(device_id=f"outlet_sim_{i + 1:02d}", name=n, on=False)
            for i, n in enumerate(outlet_names)
        }
        self._cameras: dict[str, Camera] = {
            f"camera_sim_{i + 1:02d}": Camera(device_id=f"camera_sim_{i + 1:02d}", name=n, night_mode=False)
            for i, n in enumerate(camera_names)
        }
        self.write_count = 0

    # --- SecurityPlatform ---
    async def get_locations(self) -> list[Location]:
        return [self._location]

    async def get_outlets(self, location: Location) -> list[OutletDevice]:
        return list(self._outlets.values())

    async def get_cameras(self, location: Location) -> list[Camera]:
        return list(self._cameras.values())

    async def get_location_mode(self, location: Location) -> str:
        return self._mode

    async def set_outlet(self, device: OutletDevice, on: bool) -> None:
        if device.device_id not in self._outlets:
            raise KeyError(f"Unknown outlet {device.device_id}")
        self._outlets[device.device_id] = replace(self._outlets[device.device_id], on=bool(on))
        self.write_count += 1
        logger.info("OUTLET %s set on=%s", device.name, bool(on))

    # --- Simulation controls ---
    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}")
        self._mode = mode

    def set_outlet_reported(self, name: str, on: bool) -> None:
        """Change what the outlet reports, as if switched by hand."""
        device_id = self._device_id_for(self._outlets, name)
        self._outlets[device_id] = replace(self._outlets[device_id], on=bool(on))

    def set_camera_night_mode(self, name: str, night_mode: Optional[bool]) -> None:
        device_id = self._device_id_for(self._cameras, name)
        self._cameras[device_id] = replace(self._cameras[device_id], night_mode=night_mode)

    @staticmethod
    def _device_id_for(devices: dict, name: str) -> str:
        for device_id, d in devices.items():
            if d.name == name:
                return device_id
        raise KeyError(f"No device named {name}")

    def status(self) -> dict:
        return {
            "location": self._location.name,
            "mode": self._mode,
            "outlets": [{"name": d.name, "on": d.on} for d in self._outlets.values()],
            "cameras": [{"name": c.name, "night_mode": c.night_mode} for c in self._cameras.values()],
            "write_count": self.write_count,
        }
