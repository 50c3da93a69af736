from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class ViewportState:
    anchor_date: date

    @property
    def visible_days(self) -> list[date]:
        return [self.anchor_date + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]

    def shifted(self, weeks: int) -> ViewportState:
        return ViewportState(anchor_date=self.anchor_date + timedelta(days=DAYS_PER_WEEK * weeks))


@dataclass(frozen=True)
class CalendarDay:
    """One visible day of the weekly calendar."""

    date: date
    key: str  # YYYY-MM-DD
    has_slots: bool
    slot_count: int
    selectable: bool = True
