"""
Time model for reminders.

Local values are naive wall-clock datetimes. UTC values are timezone-aware.
Offsets are minutes ahead of UTC (e.g. -300 for US Eastern, 330 for India).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytz

from app.config import settings

logger = logging.getLogger(__name__)

SAFE_TIME = {"hour": 0, "minute": 0, "second": 1, "microsecond": 0}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive values as UTC; convert aware values to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_to_safe_time(value: datetime, safe_mode: bool) -> datetime:
    """Pin the deadline to 00:00:01 on its calendar day when safe mode is on."""
    if safe_mode:
        return value.replace(**SAFE_TIME)
    return value


def local_to_utc(local_value: datetime, offset_minutes: int) -> datetime:
    wall_clock = local_value.replace(tzinfo=None)
    return (wall_clock - timedelta(minutes=offset_minutes)).replace(tzinfo=timezone.utc)


def utc_to_local(utc_value: datetime, offset_minutes: int) -> datetime:
    """Inverse of local_to_utc. Only used for display."""
    naive_utc = as_utc(utc_value).replace(tzinfo=None)
    return naive_utc + timedelta(minutes=offset_minutes)


def calculate_egress_trigger(
    trial_end_utc: datetime,
    offset_minutes: int,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Trigger instant for a reminder: max(now + 5 minutes, trial end - 48 hours).

    The offset does not change the arithmetic; it is only logged.
    """
    now = as_utc(now) if now else utc_now()
    earliest = now + timedelta(minutes=settings.minimum_lead_minutes)
    preferred = as_utc(trial_end_utc) - timedelta(hours=settings.trigger_lead_hours)
    trigger = max(earliest, preferred)

    logger.debug(
        f"Trigger for trial end {trial_end_utc.isoformat()} "
        f"(offset {offset_minutes}m): {trigger.isoformat()}"
    )
    return trigger


def calculate_time_remaining(target: datetime, now: Optional[datetime] = None) -> dict[str, int]:
    """Break down target - now into days/hours/minutes, all zero once passed."""
    now = as_utc(now) if now else utc_now()
    diff = as_utc(target) - now

    if diff <= timedelta(0):
        return {"days": 0, "hours": 0, "minutes": 0, "total_hours": 0}

    total_minutes = int(diff.total_seconds() // 60)
    total_hours = total_minutes // 60
    return {
        "days": total_hours // 24,
        "hours": total_hours % 24,
        "minutes": total_minutes % 60,
        "total_hours": total_hours,
    }


def _offset_label(offset_minutes: int) -> str:
    if offset_minutes == 0:
        return "UTC"
    sign = "+" if offset_minutes > 0 else "-"
    hours, minutes = divmod(abs(offset_minutes), 60)
    if minutes:
        return f"GMT{sign}{hours}:{minutes:02d}"
    return f"GMT{sign}{hours}"


def format_date_for_timezone(utc_value: datetime, offset_minutes: int) -> str:
    """Human-readable timestamp in the user's offset, e.g. 'Jan 10, 2025, 12:00 AM GMT-5'."""
    local = as_utc(utc_value).astimezone(pytz.FixedOffset(offset_minutes))
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{local.strftime('%b')} {local.day}, {local.year}, "
        f"{hour:02d}:{local.minute:02d} {meridiem} {_offset_label(offset_minutes)}"
    )
