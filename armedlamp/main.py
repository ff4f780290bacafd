from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, HTTPException

from .core.config import settings
from .core.log import configure_logging

from .api.routes import router as api_router, health_router
import armedlamp.api.routes as routes_module

from .domain.engine import DecisionEngine
from .domain.interfaces import SecurityPlatform
from .domain.sun_window import SunWindowCache
from .drivers.platform_sim import SimulatedSecurityPlatform
from .drivers.sunrise_sunset import SunriseSunsetClient
from .services.heartbeat import HeartbeatMonitor
from .services.scheduler import CycleScheduler


logger = logging.getLogger(__name__)


sim_platform: SimulatedSecurityPlatform | None = None

def build_platform() -> SecurityPlatform:
    global sim_platform

    if settings.platform_mode.lower() != "sim":
        raise RuntimeError(f"Unsupported platform_mode: {settings.platform_mode!r} (bundled: 'sim')")

    sim_platform = SimulatedSecurityPlatform(
        location_name=settings.sim_location_name,
        latitude=settings.sim_latitude,
        longitude=settings.sim_longitude,
        outlet_names=(settings.outlet_name,),
        camera_names=(settings.camera_name,) if settings.camera_name else (),
    )
    return sim_platform

platform = build_platform()


# --- Singletons ---
sun_window = SunWindowCache(
    SunriseSunsetClient(
        base_url=settings.sunrise_sunset_url,
        timeout=settings.http_timeout_seconds,
    )
)
engine = DecisionEngine(
    platform=platform,
    sun_window=sun_window,
    outlet_name=settings.outlet_name,
    location_name=settings.location_name,
    camera_name=settings.camera_name,
)
heartbeat = HeartbeatMonitor(stale_after=timedelta(seconds=settings.heartbeat_stale_seconds))
scheduler: CycleScheduler | None = None


def get_scheduler() -> CycleScheduler:
    assert scheduler is not None
    return scheduler


def get_engine() -> DecisionEngine:
    return engine


def get_heartbeat() -> HeartbeatMonitor:
    return heartbeat


def get_sim_platform() -> SimulatedSecurityPlatform:
    if sim_platform is None:
        raise HTTPException(status_code=404, detail="Simulated platform not in use")
    return sim_platform


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting %s (platform=%s, outlet=%s)", settings.app_name, settings.platform_mode, settings.outlet_name)

    global scheduler
    scheduler = CycleScheduler(
        engine=engine,
        heartbeat=heartbeat,
        cron_expression=settings.lamp_cron,
    )
    await scheduler.start()

    try:
        yield
    finally:
        if scheduler:
            await scheduler.stop()

        logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Make the dependency functions in routes resolve to the real ones
app.dependency_overrides[routes_module.get_scheduler] = get_scheduler
app.dependency_overrides[routes_module.get_engine] = get_engine
app.dependency_overrides[routes_module.get_heartbeat] = get_heartbeat
app.dependency_overrides[routes_module.get_sim_platform] = get_sim_platform

app.include_router(health_router)
app.include_router(api_router, prefix="/api")
