from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Optional

from .interfaces import SunTimesProvider
from .models import Location, SunWindow
from ..core.timeutil import now_utc, utc_day

logger = logging.getLogger(__name__)


class SunWindowCache:
    """
    Today's sunrise/sunset, fetched at most once per UTC calendar day.

    A window is only trusted while its day matches today's UTC date. When
    the refresh fails the old window stays in place (unused) and the error
    goes to the caller.
    """

    def __init__(
        self,
        fetcher: SunTimesProvider,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._fetcher = fetcher
        self._clock = clock
        self._window: Optional[SunWindow] = None

    @property
    def window(self) -> Optional[SunWindow]:
        return self._window

    def is_fresh(self, now: datetime) -> bool:
        return self._window is not None and self._window.valid_for_day == utc_day(now)

    async def is_night_now(self, location: Location) -> bool:
        now = self._clock()
        if not self.is_fresh(now):
            today = utc_day(now)
            logger.info(
                "Getting sunrise and sunset for %s at %s",
                today.isoformat(), location.name,
            )
            times = await self._fetcher.fetch(location, today)
            # swap both instants in one assignment
            self._window = SunWindow(
                valid_for_day=today,
                sunrise=times.sunrise,
                sunset=times.sunset,
            )

        night = self._window.is_night(now)
        logger.info("It is %safter sunset or before dawn", "" if night else "not ")
        return night
