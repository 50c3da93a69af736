from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from mentor_scheduling.application.ports.schedule_sink import ScheduleSinkPort
from mentor_scheduling.application.use_cases.booking_request import BookingRequestBuilder
from mentor_scheduling.application.use_cases.calendar_window import CalendarWindowNavigator
from mentor_scheduling.application.use_cases.day_grouping import DayIndex, find_slot, group_by_day
from mentor_scheduling.application.use_cases.normalize_slots import drop_past_slots, normalize_all
from mentor_scheduling.application.use_cases.selection import SelectionResult, SelectionUseCase
from mentor_scheduling.application.utils.catalog import (
    build_timezone_options,
    normalize_agenda_templates,
    normalize_session_types,
)
from mentor_scheduling.application.utils.date_utils import parse_instant, resolve_timezone
from mentor_scheduling.application.utils.payload import mentor_from_payload, published_slots
from mentor_scheduling.domain.entities.booking_request import BookingRequest
from mentor_scheduling.domain.entities.booking_window import DEFAULT_HORIZON_DAYS, BookingWindowPolicy
from mentor_scheduling.domain.entities.mentor import MentorRef
from mentor_scheduling.domain.entities.selection_state import SelectionState
from mentor_scheduling.domain.entities.service_catalog import (
    AgendaTemplate,
    SessionTypeOption,
    TimezoneOption,
)
from mentor_scheduling.domain.entities.slot import AvailabilityInput, NormalizedSlot
from mentor_scheduling.domain.entities.viewport import CalendarDay


class SessionScheduler:
    """
    One booking attempt against a mentor's availability.

    Normalized slots and the day index are cached on the identity of the
    availability snapshot. Calendar rows are cached for the visible week only.
    Replacing the snapshot invalidates the caches and reconciles the selection.
    Without an availability list the slots published on the mentor record are used.
    """

    def __init__(
        self,
        mentor: MentorRef | Mapping[str, Any],
        availability: Sequence[AvailabilityInput] | None,
        session_types: Iterable[Any] = (),
        timezone_options: Sequence[TimezoneOption] = (),
        default_timezone: TimezoneOption | str | None = None,
        scheduling_window_days: int | None = DEFAULT_HORIZON_DAYS,
        now: datetime | None = None,
        timezone: ZoneInfo | str | None = "UTC",
        viewer_timezone: str | None = None,
        agenda_templates: Iterable[Any] | None = None,
        anchor: date | None = None,
        hide_past_slots: bool = False,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._timezone = resolve_timezone(timezone)
        self._now = self._resolve_now(now)
        self._mentor = mentor if isinstance(mentor, MentorRef) else mentor_from_payload(mentor)
        self._policy = BookingWindowPolicy(horizon_days=scheduling_window_days)
        self._hide_past_slots = hide_past_slots
        self._session_types = normalize_session_types(session_types)
        mentor_templates = self._mentor.payload.get("sessionTemplates") if isinstance(self._mentor.payload, Mapping) else None
        self._agenda_templates = normalize_agenda_templates(mentor_templates, agenda_templates)

        if not isinstance(availability, (list, tuple)):
            availability = published_slots(self._mentor)
        self._availability: Sequence[AvailabilityInput] = availability
        self._slots_cache: tuple[Sequence[AvailabilityInput], list[NormalizedSlot]] | None = None
        self._index_cache: tuple[Sequence[AvailabilityInput], DayIndex] | None = None
        self._calendar_cache: tuple[Sequence[AvailabilityInput], date, list[CalendarDay]] | None = None
        self._selection: tuple[Sequence[AvailabilityInput], SelectionUseCase] | None = None

        if default_timezone is None:
            default_timezone = self._mentor.timezone
        default_name = default_timezone.value if isinstance(default_timezone, TimezoneOption) else default_timezone
        self._slot_timezone = default_name
        self._timezone_options = list(timezone_options) or build_timezone_options(
            self.slots, default_name, viewer_timezone
        )
        self._default_timezone = self._resolve_timezone_option(default_timezone)

        self.navigator = CalendarWindowNavigator(timezone=self._timezone, anchor=anchor, clock=lambda: self._now)
        self._state = self._selection_use_case().initial_state()

    @property
    def mentor(self) -> MentorRef:
        return self._mentor

    @property
    def policy(self) -> BookingWindowPolicy:
        return self._policy

    @property
    def now(self) -> datetime:
        return self._now

    @property
    def session_types(self) -> list[SessionTypeOption]:
        return list(self._session_types)

    @property
    def timezone_options(self) -> list[TimezoneOption]:
        return list(self._timezone_options)

    @property
    def agenda_templates(self) -> list[AgendaTemplate]:
        return list(self._agenda_templates)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def slots(self) -> list[NormalizedSlot]:
        source = self._availability
        if self._slots_cache is None or self._slots_cache[0] is not source:
            slots = normalize_all(self._availability, self._timezone, self._slot_timezone)
            if self._hide_past_slots:
                slots = drop_past_slots(slots, self._now)
            self._slots_cache = (source, slots)
        return self._slots_cache[1]

    @property
    def day_index(self) -> DayIndex:
        source = self._availability
        if self._index_cache is None or self._index_cache[0] is not source:
            self._index_cache = (source, group_by_day(self.slots, self._timezone))
        return self._index_cache[1]

    def calendar_days(self) -> list[CalendarDay]:
        source, anchor = self._availability, self.navigator.anchor
        cached = self._calendar_cache
        if cached is None or cached[0] is not source or cached[1] != anchor:
            days = self.navigator.day_summaries(self.day_index, self._policy, self._now)
            self._calendar_cache = (source, anchor, days)
        return self._calendar_cache[2]

    def page_forward(self) -> list[CalendarDay]:
        self.navigator.page_forward()
        return self.calendar_days()

    def page_backward(self) -> list[CalendarDay]:
        self.navigator.page_backward()
        return self.calendar_days()

    def slots_for_day(self, day_key: str) -> tuple[NormalizedSlot, ...]:
        return self.day_index.get(day_key, ())

    def selected_slot(self) -> NormalizedSlot | None:
        return find_slot(self.day_index, self._state.selected_day_key, self._state.selected_slot_id)

    def replace_availability(self, availability: Sequence[AvailabilityInput]) -> SelectionState:
        """Swap in a new availability snapshot and drop any selection it no longer supports."""
        self._availability = availability
        self._state = self._selection_use_case().reconcile(self._state)
        return self._state

    def select_day(self, day_key: str) -> SelectionResult:
        return self._apply(self._selection_use_case().select_day(self._state, day_key))

    def select_slot(self, slot_id: str) -> SelectionResult:
        return self._apply(self._selection_use_case().select_slot(self._state, slot_id))

    def select_session_type(self, option: SessionTypeOption | str | None) -> SelectionResult:
        if isinstance(option, str):
            match = next((entry for entry in self._session_types if entry.id == option), None)
            if match is None:
                self._logger.info("Selection refused", extra={"reason": "unknown_session_type", "session_type": option})
                return SelectionResult(updated_state=self._state, accepted=False, reason="unknown_session_type")
            option = match
        return self._apply(self._selection_use_case().select_session_type(self._state, option))

    def select_timezone(self, option: TimezoneOption | str | None) -> SelectionResult:
        return self._apply(self._selection_use_case().select_timezone(self._state, self._resolve_timezone_option(option)))

    def set_notes(self, text: str) -> SelectionResult:
        return self._apply(self._selection_use_case().set_notes(self._state, text))

    def apply_agenda_template(self, template_id: str) -> SelectionResult:
        template = next((entry for entry in self._agenda_templates if entry.id == template_id), None)
        if template is None:
            return SelectionResult(updated_state=self._state, accepted=False, reason="unknown_agenda_template")
        return self._apply(self._selection_use_case().apply_agenda_template(self._state, template))

    def reset(self) -> SelectionState:
        self._state = self._selection_use_case().reset()
        return self._state

    def close(self) -> None:
        """Cancel the attempt without booking."""
        self._logger.info("Booking flow closed", extra={"mentor_id": self._mentor.id})
        self.reset()

    def build_request(self) -> BookingRequest | None:
        return BookingRequestBuilder(self.day_index, self._agenda_templates).build(self._state, self._mentor)

    def submit(self, sink: ScheduleSinkPort) -> str | None:
        """Build and hand off the booking request. Returns the session id, or None if incomplete."""
        request = self.build_request()
        if request is None:
            return None
        session_id = sink.submit(request)
        self.reset()
        return session_id

    def _apply(self, result: SelectionResult) -> SelectionResult:
        self._state = result.updated_state
        return result

    def _selection_use_case(self) -> SelectionUseCase:
        source = self._availability
        if self._selection is None or self._selection[0] is not source:
            use_case = SelectionUseCase(
                day_index=self.day_index,
                policy=self._policy,
                now=self._now,
                timezone=self._timezone,
                session_types=self._session_types,
                timezone_options=self._timezone_options,
                default_timezone=self._default_timezone,
            )
            self._selection = (source, use_case)
        return self._selection[1]

    def _resolve_timezone_option(self, option: TimezoneOption | str | None) -> TimezoneOption | str | None:
        if isinstance(option, str):
            return next((entry for entry in self._timezone_options if entry.value == option), option)
        return option

    def _resolve_now(self, now: datetime | None) -> datetime:
        """Naive values are wall-clock time in the engine timezone."""
        if now is None:
            return datetime.now(self._timezone)
        resolved = parse_instant(now, self._timezone)
        if resolved is None:
            raise ValueError(f"unusable reference time: {now!r}")
        return resolved
