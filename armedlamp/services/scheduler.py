from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..core.timeutil import now_utc
from ..domain.engine import DecisionEngine
from ..domain.models import CycleDecision
from .heartbeat import HeartbeatMonitor


logger = logging.getLogger(__name__)

JOB_ID = "lamp_cycle"


@dataclass
class LiveState:
    last_decision: Optional[str] = None
    last_reason: Optional[str] = None
    last_error: Optional[str] = None
    last_cycle_started_at: Optional[datetime] = None
    last_cycle_completed_at: Optional[datetime] = None
    cycles_run: int = 0
    cycles_failed: int = 0
    cycles_skipped: int = 0


class CycleScheduler:
    """
    Runs the decision cycle on a cron schedule.

    Only one cycle is in flight at a time: a tick that arrives while the
    previous cycle is still running is dropped (and does not touch the
    heartbeat). Every cycle that does run marks the heartbeat when it
    settles, whether it succeeded or raised.
    """

    def __init__(
        self,
        engine: DecisionEngine,
        heartbeat: HeartbeatMonitor,
        cron_expression: str = "*/5 * * * *",
    ) -> None:
        self._engine = engine
        self._heartbeat = heartbeat
        self._trigger = CronTrigger.from_crontab(cron_expression)
        self._cron_expression = cron_expression

        self._lock = asyncio.Lock()
        self._scheduler: Optional[AsyncIOScheduler] = None

        self.live = LiveState()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def start(self) -> None:
        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.run_once,
            self._trigger,
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            next_run_time=now_utc(),  # first cycle right away
        )
        self._scheduler.start()
        logger.info("Lamp scheduler started (cron=%s)", self._cron_expression)

    async def stop(self) -> None:
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        logger.info("Lamp scheduler stopped")

    async def run_once(self) -> Optional[CycleDecision]:
        if self.busy:
            self.live.cycles_skipped += 1
            logger.warning("Previous lamp cycle still running, skipping this tick")
            return None

        async with self._lock:
            self.live.last_cycle_started_at = now_utc()
            decision: Optional[CycleDecision] = None
            try:
                decision = await self._engine.run_cycle()
                self.live.last_decision = decision.action
                self.live.last_reason = decision.reason
                self.live.last_error = None
                logger.info("Cycle finished: %s (%s)", decision.action, decision.reason)
            except Exception as e:
                self.live.cycles_failed += 1
                self.live.last_decision = None
                self.live.last_reason = None
                self.live.last_error = str(e) or type(e).__name__
                logger.exception("Lamp cycle failed: %s", e)
            finally:
                # A failed cycle still proves the loop is alive
                self._heartbeat.beat()
                self.live.last_cycle_completed_at = self._heartbeat.last_cycle_completed_at
                self.live.cycles_run += 1

        return decision
