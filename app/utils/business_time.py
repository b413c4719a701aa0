from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo
from app.core.config import settings


def business_zone(tz_name: str | None = None) -> ZoneInfo:
    return ZoneInfo(tz_name or settings.BUSINESS_TIMEZONE)


def business_now(tz_name: str | None = None) -> datetime:
    """Current wall-clock time in the business zone, returned naive for storage."""
    return datetime.now(business_zone(tz_name)).replace(tzinfo=None, microsecond=0)


def business_today(tz_name: str | None = None) -> date:
    return datetime.now(business_zone(tz_name)).date()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def format_business_time(value: datetime) -> str:
    return value.strftime("%m/%d/%Y, %I:%M:%S %p")
