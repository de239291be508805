"""
Weekly Anchor Dates

KCS publishes one customs rate table per week, starting on Sunday in
Korea Standard Time. Anchors are computed in that timezone whatever the
machine's local timezone is.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Seoul"
WEEK = timedelta(days=7)


def local_today(now: datetime | None = None, tz: str = DEFAULT_TIMEZONE) -> date:
    """Calendar date of *now* in *tz*. Naive datetimes are taken as UTC."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz)).date()


def last_sunday(day: date) -> date:
    """Most recent Sunday on or before *day*."""
    # weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def next_sunday(day: date) -> date:
    """Upcoming Sunday, or *day* itself when it is a Sunday."""
    return day + timedelta(days=(6 - day.weekday()) % 7)


def recent_sundays(
    count: int,
    now: datetime | None = None,
    tz: str = DEFAULT_TIMEZONE,
    include_upcoming: bool = False,
) -> list[date]:
    """
    Return *count* weekly anchors, most recent first, 7 days apart.

    Args:
        count: Number of weeks (>= 1)
        now: Reference instant. Defaults to the current time.
        tz: IANA timezone the weeks are anchored in
        include_upcoming: Start from the upcoming Sunday instead of the
            last one, to pick up rates published ahead of the week

    Returns:
        List of Sunday dates
    """
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")

    today = local_today(now, tz)
    first = next_sunday(today) if include_upcoming else last_sunday(today)
    return [first - WEEK * i for i in range(count)]


def to_api_date(day: date) -> str:
    """Compact form used by the upstream API (``20240107``)."""
    return day.strftime("%Y%m%d")


def to_display_date(day: date) -> str:
    """Separated form used in the snapshot (``2024-01-07``)."""
    return day.isoformat()


def parse_api_date(value: str) -> date:
    return datetime.strptime(value, "%Y%m%d").date()


def period_range(start: date) -> str:
    """Human-readable validity window of the week starting on *start*."""
    end = start + timedelta(days=6)
    return f"{start.isoformat()} 00:00 ~ {end.isoformat()} 24:00"
