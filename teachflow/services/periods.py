"""
Calendar helpers resolved in the caller's timezone

Datetimes are stored as naive UTC; calendar dates (due dates, "today",
month boundaries) are taken in the teacher's own timezone.
"""

from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from teachflow.core.context import Caller
from teachflow.core.errors import ValidationFailure


class PeriodPreset(str, Enum):
    """Named ranges offered by the payments filter"""
    ALL = "all"
    FUTURE = "future"
    LAST_7 = "last7"
    LAST_30 = "last30"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"


def caller_zone(caller: Caller) -> ZoneInfo:
    return ZoneInfo(caller.timezone)


def local_now(caller: Caller, now: Optional[datetime] = None) -> datetime:
    """Current time in the caller's timezone; naive ``now`` is read as UTC"""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(caller_zone(caller))


def local_today(caller: Caller, now: Optional[datetime] = None) -> date:
    return local_now(caller, now).date()


def to_utc_naive(value: datetime) -> datetime:
    """Normalize to the naive-UTC storage convention"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def day_range_utc(caller: Caller, start: date, end: date) -> Tuple[datetime, datetime]:
    """UTC bounds [start 00:00, day after end 00:00) of a local date range"""
    zone = caller_zone(caller)
    lower = datetime.combine(start, time.min, tzinfo=zone)
    upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=zone)
    return to_utc_naive(lower), to_utc_naive(upper)


def month_range(day: date) -> Tuple[date, date]:
    first = day.replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    return first, next_first - timedelta(days=1)


def resolve_period(
    preset: PeriodPreset | str,
    caller: Caller,
    now: Optional[datetime] = None,
) -> Tuple[Optional[date], Optional[date]]:
    """Translate a preset into an inclusive (start, end) date range"""
    try:
        preset = PeriodPreset(preset)
    except ValueError:
        raise ValidationFailure(f"Unknown period: {preset}")

    today = local_today(caller, now)

    if preset == PeriodPreset.ALL:
        return None, None
    if preset == PeriodPreset.FUTURE:
        return today, None
    if preset == PeriodPreset.LAST_7:
        return today - timedelta(days=7), today
    if preset == PeriodPreset.LAST_30:
        return today - timedelta(days=30), today
    if preset == PeriodPreset.THIS_MONTH:
        return month_range(today)
    # LAST_MONTH
    return month_range(today.replace(day=1) - timedelta(days=1))
