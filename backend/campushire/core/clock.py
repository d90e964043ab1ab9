"""
Campus wall-clock time
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from campushire.core.config import settings


def campus_now() -> datetime:
    """Current campus local time as a naive datetime.
    
    Window dates and times are stored without a zone and read as campus
    local time, so window checks use this rather than UTC.
    """
    return datetime.now(ZoneInfo(settings.CAMPUS_TIMEZONE)).replace(tzinfo=None)


def utc_now() -> datetime:
    """Timezone-aware UTC now, used for audit and placement timestamps"""
    return datetime.now(timezone.utc)


def to_campus_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive campus time; naive values pass through"""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.CAMPUS_TIMEZONE)).replace(tzinfo=None)
