from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo
from .config import settings


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_local() -> datetime:
    return now_utc().astimezone(ZoneInfo(settings.timezone))


def utc_day(dt: datetime) -> date:
    """Calendar day of ``dt`` in UTC (naive datetimes are taken as UTC)."""
    if dt.tzinfo is None:
        return dt.date()
    return dt.astimezone(timezone.utc).date()
