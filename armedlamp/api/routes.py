from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from ..core.config import settings
from ..core.timeutil import now_local
from ..domain.engine import DecisionEngine
from ..drivers.platform_sim import SimulatedSecurityPlatform
from ..services.heartbeat import HeartbeatMonitor
from ..services.scheduler import CycleScheduler
from .schemas import SimCameraRequest, SimModeRequest, SimOutletRequest

logger = logging.getLogger(__name__)

router = APIRouter()
health_router = APIRouter()


# --- Dependency getters ---
# Placeholders; main.py swaps in the real ones via app.dependency_overrides.
def get_scheduler() -> CycleScheduler:  # overridden in main
    raise RuntimeError("Scheduler dependency not configured")

def get_engine() -> DecisionEngine:  # overridden in main
    raise RuntimeError("Engine dependency not configured")

def get_heartbeat() -> HeartbeatMonitor:  # overridden in main
    raise RuntimeError("Heartbeat dependency not configured")

def get_sim_platform() -> SimulatedSecurityPlatform:  # overridden in main
    raise RuntimeError("Simulated platform dependency not configured")


def _age_ms(hb: HeartbeatMonitor) -> int:
    return int(hb.age().total_seconds() * 1000)


@health_router.get("/health", response_class=PlainTextResponse)
async def health(hb: HeartbeatMonitor = Depends(get_heartbeat)):
    if not hb.is_fresh():
        age_ms = _age_ms(hb)
        logger.error("Heartbeat older than expected: %d ms", age_ms)
        raise HTTPException(status_code=500, detail=f"Heartbeat older than expected: {age_ms} ms")
    return "Okay"


@router.get("/status")
async def get_status(
    svc: CycleScheduler = Depends(get_scheduler),
    engine: DecisionEngine = Depends(get_engine),
    hb: HeartbeatMonitor = Depends(get_heartbeat),
):
    live = svc.live
    window = engine.sun_window.window
    return {
        "app": settings.app_name,
        "now_local": now_local().isoformat(),
        "heartbeat": {
            "last_cycle_completed_at": hb.last_cycle_completed_at.isoformat(),
            "age_ms": _age_ms(hb),
            "fresh": hb.is_fresh(),
        },
        "cycle": {
            "busy": svc.busy,
            "last_decision": live.last_decision,
            "last_reason": live.last_reason,
            "last_error": live.last_error,
            "last_started_at": live.last_cycle_started_at.isoformat() if live.last_cycle_started_at else None,
            "runs": live.cycles_run,
            "failed": live.cycles_failed,
            "skipped": live.cycles_skipped,
        },
        "sun_window": {
            "valid_for_day": window.valid_for_day.isoformat(),
            "sunrise": window.sunrise.isoformat(),
            "sunset": window.sunset.isoformat(),
        } if window else None,
        "outlet": {
            "name": engine.outlet_name,
            "last_commanded_on": engine.actuator.state.last_commanded_on,
        },
    }


@router.post("/cycle/run")
async def run_cycle_now(svc: CycleScheduler = Depends(get_scheduler)):
    if svc.busy:
        raise HTTPException(status_code=409, detail="A cycle is already running")
    decision = await svc.run_once()
    return {
        "ok": decision is not None,
        "decision": decision.action if decision else None,
        "reason": decision.reason if decision else None,
        "changed": decision.changed if decision else False,
        "error": svc.live.last_error,
    }


# --- Simulation endpoints ---
@router.get("/sim/status")
async def sim_status(platform: SimulatedSecurityPlatform = Depends(get_sim_platform)):
    return platform.status()


@router.post("/sim/mode")
async def sim_set_mode(req: SimModeRequest, platform: SimulatedSecurityPlatform = Depends(get_sim_platform)):
    platform.set_mode(req.mode)
    return {"ok": True, "mode": req.mode}


@router.post("/sim/outlet")
async def sim_set_outlet(
    req: SimOutletRequest,
    platform: SimulatedSecurityPlatform = Depends(get_sim_platform),
    engine: DecisionEngine = Depends(get_engine),
):
    name = req.name or engine.outlet_name
    try:
        platform.set_outlet_reported(name, req.on)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True, "name": name, "on": req.on}


@router.post("/sim/camera")
async def sim_set_camera(req: SimCameraRequest, platform: SimulatedSecurityPlatform = Depends(get_sim_platform)):
    try:
        platform.set_camera_night_mode(req.name, req.night_mode)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True, "name": req.name, "night_mode": req.night_mode}
