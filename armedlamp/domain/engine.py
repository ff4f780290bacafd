from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from .interfaces import SecurityPlatform
from .models import Camera, CycleDecision, Location, OutletDevice
from .sun_window import SunWindowCache

logger = logging.getLogger(__name__)

ARMED_MODE = "away"


class ArmedStateProbe:
    def __init__(self, platform: SecurityPlatform) -> None:
        self._platform = platform

    async def is_armed(self, location: Location) -> bool:
        mode = await self._platform.get_location_mode(location)
        logger.info("Location mode is %s", mode)
        return mode == ARMED_MODE


@dataclass
class OutletActuationState:
    last_commanded_on: bool = False


class OutletActuator:
    def __init__(self, platform: SecurityPlatform) -> None:
        self._platform = platform
        self.state = OutletActuationState()

    async def set_outlet(self, device: OutletDevice, desired_on: bool) -> bool:
        """
        Drive ``device`` to ``desired_on``; returns True if a write was sent.

        The desired value is remembered before the write. A failed write
        leaves it in place and the error propagates.
        """
        self.state.last_commanded_on = desired_on
        label = "on" if desired_on else "off"

        if device.on == desired_on:
            logger.info("Device %s is already %s", device.name, label)
            return False

        logger.info("Turning %s %s", device.name, label)
        await self._platform.set_outlet(device, desired_on)
        return True


class DecisionEngine:
    def __init__(
        self,
        platform: SecurityPlatform,
        sun_window: SunWindowCache,
        outlet_name: str,
        location_name: Optional[str] = None,
        camera_name: Optional[str] = None,
    ) -> None:
        self._platform = platform
        self._sun_window = sun_window
        self._outlet_name = outlet_name
        self._location_name = location_name
        self._camera_name = camera_name

        self.probe = ArmedStateProbe(platform)
        self.actuator = OutletActuator(platform)

    @property
    def sun_window(self) -> SunWindowCache:
        return self._sun_window

    @property
    def outlet_name(self) -> str:
        return self._outlet_name

    async def _find_location(self) -> Optional[Location]:
        locations = await self._platform.get_locations()
        if self._location_name is None:
            return locations[0] if locations else None
        return next((loc for loc in locations if loc.name == self._location_name), None)

    async def _find_outlet(self, location: Location) -> Optional[OutletDevice]:
        outlets = await self._platform.get_outlets(location)
        return next((d for d in outlets if d.name == self._outlet_name), None)

    async def _find_camera(self, location: Location) -> Optional[Camera]:
        cameras = await self._platform.get_cameras(location)
        camera = next((c for c in cameras if c.name == self._camera_name), None)
        if camera is None:
            logger.warning("Camera with name %s not found, using sun times only", self._camera_name)
        return camera

    async def _is_dark(self, location: Location) -> bool:
        night = await self._sun_window.is_night_now(location)
        if not self._camera_name:
            return night

        # Either signal alone counts as dark
        camera = await self._find_camera(location)
        camera_dark = camera is not None and camera.night_mode is True
        if camera_dark:
            logger.info("Camera %s reports night mode", camera.name)
        return night or camera_dark

    async def run_cycle(self) -> CycleDecision:
        location = await self._find_location()
        if location is None:
            logger.error("Location %s not found", self._location_name or "(any)")
            return CycleDecision("SKIPPED", "Location not found")

        outlet = await self._find_outlet(location)
        if outlet is None:
            logger.error("Device with name %s not found", self._outlet_name)
            return CycleDecision("SKIPPED", f"Device {self._outlet_name} not found")

        armed = await self.probe.is_armed(location)

        if armed:
            night = await self._is_dark(location)
            changed = await self.actuator.set_outlet(outlet, night)
            reason = "Armed and dark" if night else "Armed and daylight"
            return CycleDecision("ON" if night else "OFF", reason, armed=True, night=night, changed=changed)

        if self.actuator.state.last_commanded_on:
            changed = await self.actuator.set_outlet(outlet, False)
            return CycleDecision("OFF", "Disarmed, turning off what we turned on", armed=False, changed=changed)

        return CycleDecision("NOOP", "Disarmed, outlet not ours to touch", armed=False)
