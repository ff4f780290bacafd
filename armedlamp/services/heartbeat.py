from __future__ import annotations
from datetime import datetime, timedelta
from typing import Callable

from ..core.timeutil import now_utc


class HeartbeatMonitor:
    """Time of the last settled decision cycle. Starts at construction time."""

    def __init__(
        self,
        stale_after: timedelta = timedelta(minutes=6),
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._clock = clock
        self.stale_after = stale_after
        self.last_cycle_completed_at: datetime = clock()

    def beat(self) -> None:
        self.last_cycle_completed_at = self._clock()

    def age(self) -> timedelta:
        return self._clock() - self.last_cycle_completed_at

    def is_fresh(self) -> bool:
        return self.age() <= self.stale_after
