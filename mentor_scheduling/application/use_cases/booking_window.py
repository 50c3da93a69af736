from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from mentor_scheduling.application.utils.date_utils import local_date
from mentor_scheduling.domain.entities.booking_window import BookingWindowPolicy


def is_selectable(
    day: date | datetime,
    now: date | datetime,
    policy: BookingWindowPolicy,
    timezone: ZoneInfo,
) -> bool:
    """
    Whether a calendar day may be booked, independent of slot availability.
    A falsy horizon (None or 0) leaves the window open in both directions.
    """
    if policy.is_open_ended:
        return True

    today = local_date(now, timezone)
    target = local_date(day, timezone)
    return today <= target <= today + timedelta(days=policy.horizon_days)
