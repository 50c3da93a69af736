from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from mentor_scheduling.application.use_cases.booking_window import is_selectable
from mentor_scheduling.application.use_cases.day_grouping import DayIndex
from mentor_scheduling.application.utils.date_utils import local_date
from mentor_scheduling.domain.entities.booking_window import BookingWindowPolicy
from mentor_scheduling.domain.entities.viewport import CalendarDay, ViewportState


class CalendarWindowNavigator:
    """
    Seven-day viewport over the calendar.
    Paging is unbounded; booking limits are reported per day, not enforced here.
    """

    def __init__(
        self,
        timezone: ZoneInfo,
        anchor: date | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._timezone = timezone
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._logger = logging.getLogger(__name__)
        self._viewport: ViewportState
        self.initialize(anchor)

    @property
    def viewport(self) -> ViewportState:
        return self._viewport

    @property
    def anchor(self) -> date:
        return self._viewport.anchor_date

    def initialize(self, anchor: date | None = None) -> None:
        self._viewport = ViewportState(anchor_date=anchor or self._today())

    def page_forward(self) -> None:
        self._viewport = self._viewport.shifted(1)
        self._logger.debug("Calendar paged forward", extra={"anchor": self.anchor.isoformat()})

    def page_backward(self) -> None:
        self._viewport = self._viewport.shifted(-1)
        self._logger.debug("Calendar paged backward", extra={"anchor": self.anchor.isoformat()})

    def visible_days(self) -> list[date]:
        return self._viewport.visible_days

    def day_summaries(
        self,
        index: DayIndex,
        policy: BookingWindowPolicy | None = None,
        now: datetime | date | None = None,
    ) -> list[CalendarDay]:
        reference = now if now is not None else self._clock()
        summaries: list[CalendarDay] = []
        for day in self.visible_days():
            key = day.isoformat()
            count = len(index.get(key, ()))
            summaries.append(
                CalendarDay(
                    date=day,
                    key=key,
                    has_slots=count > 0,
                    slot_count=count,
                    selectable=True if policy is None else is_selectable(day, reference, policy, self._timezone),
                )
            )
        return summaries

    def _today(self) -> date:
        return local_date(self._clock(), self._timezone)
