from datetime import date, datetime, timezone as dt_timezone
from typing import Optional
import pytz

from tracky.config import settings


def today_local(tz_name: Optional[str] = None) -> date:
    """Today's calendar date in the given (or configured) timezone."""
    tz = pytz.timezone(tz_name or settings.DEFAULT_TIMEZONE)
    return datetime.now(dt_timezone.utc).astimezone(tz).date()


def resolve_day(day: Optional[date], tz_name: Optional[str] = None) -> date:
    return day if day is not None else today_local(tz_name)
