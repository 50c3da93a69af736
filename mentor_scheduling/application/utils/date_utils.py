from __future__ import annotations

from datetime import date, datetime, time, timezone as dt_timezone
from zoneinfo import ZoneInfo


def resolve_timezone(tz: ZoneInfo | str | None) -> ZoneInfo:
    """Return a ZoneInfo for an IANA name. Unknown names raise ZoneInfoNotFoundError."""
    if isinstance(tz, ZoneInfo):
        return tz
    return ZoneInfo(tz or "UTC")


def parse_instant(value: object, tz: ZoneInfo) -> datetime | None:
    """
    Parse an availability instant into an aware datetime.
    Accepts ISO-8601 strings, datetimes, dates and POSIX timestamps (seconds).
    Naive values are read in the given local timezone. Returns None if unparseable.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=tz)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, dt_timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=tz)

    return None


def iso_utc(moment: datetime) -> str:
    """Render an instant as UTC with millisecond precision, e.g. 2024-05-01T14:30:00.000Z."""
    utc = moment.astimezone(dt_timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def local_date(moment: datetime | date, tz: ZoneInfo) -> date:
    """Calendar date of an instant in tz. Naive datetimes are already tz wall-clock time."""
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=tz)
        return moment.astimezone(tz).date()
    return moment


def day_key(moment: datetime | date, tz: ZoneInfo) -> str:
    """Calendar-day key (YYYY-MM-DD) of an instant in local time."""
    return local_date(moment, tz).isoformat()


def parse_day_key(key: str) -> date | None:
    try:
        return date.fromisoformat(key)
    except (TypeError, ValueError):
        return None


def format_time_label(moment: datetime, tz: ZoneInfo) -> str:
    """12-hour clock label, e.g. '2:30 PM'."""
    local = moment.astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_range_label(start: datetime, end: datetime, tz: ZoneInfo) -> str:
    return f"{format_time_label(start, tz)} - {format_time_label(end, tz)}"


def format_day_label(day: date) -> str:
    """Short day label, e.g. 'Mon, Jun 3'."""
    return f"{day.strftime('%a')}, {day.strftime('%b')} {day.day}"
