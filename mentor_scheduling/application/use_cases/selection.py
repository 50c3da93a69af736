from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime
from zoneinfo import ZoneInfo

from mentor_scheduling.application.use_cases.booking_window import is_selectable
from mentor_scheduling.application.use_cases.day_grouping import DayIndex, find_slot
from mentor_scheduling.application.utils.date_utils import parse_day_key
from mentor_scheduling.domain.entities.booking_window import BookingWindowPolicy
from mentor_scheduling.domain.entities.selection_state import SelectionState
from mentor_scheduling.domain.entities.service_catalog import (
    AgendaTemplate,
    SessionTypeOption,
    TimezoneOption,
)


@dataclass(frozen=True)
class SelectionResult:
    """Result of a selection transition."""

    updated_state: SelectionState
    accepted: bool
    reason: str | None = None  # why a transition was refused


class SelectionUseCase:
    """
    Selection state machine for one booking attempt.
    Refused transitions hand back the prior state untouched.
    """

    def __init__(
        self,
        day_index: DayIndex,
        policy: BookingWindowPolicy,
        now: datetime | date,
        timezone: ZoneInfo,
        session_types: Sequence[SessionTypeOption] = (),
        timezone_options: Sequence[TimezoneOption] = (),
        default_timezone: TimezoneOption | str | None = None,
    ) -> None:
        self._day_index = day_index
        self._policy = policy
        self._now = now
        self._timezone = timezone
        self._session_types = tuple(session_types)
        self._timezone_options = tuple(timezone_options)
        self._default_timezone = default_timezone
        self._logger = logging.getLogger(__name__)

    def initial_state(self) -> SelectionState:
        default_timezone = self._default_timezone
        if default_timezone is None and self._timezone_options:
            default_timezone = self._timezone_options[0]
        return SelectionState(
            selected_session_type=self._session_types[0] if self._session_types else None,
            selected_timezone=default_timezone,
        )

    def reset(self) -> SelectionState:
        return self.initial_state()

    def select_day(self, state: SelectionState, day_key: str) -> SelectionResult:
        day = parse_day_key(day_key)
        if day is None:
            return self._refuse(state, "invalid_day_key", day_key=day_key)
        if not self._day_index.get(day_key):
            return self._refuse(state, "no_slots", day_key=day_key)
        if not is_selectable(day, self._now, self._policy, self._timezone):
            return self._refuse(state, "outside_booking_window", day_key=day_key)

        return SelectionResult(
            updated_state=replace(state, selected_day_key=day_key, selected_slot_id=None),
            accepted=True,
        )

    def select_slot(self, state: SelectionState, slot_id: str) -> SelectionResult:
        if state.selected_day_key is None:
            return self._refuse(state, "no_day_selected", slot_id=slot_id)
        if find_slot(self._day_index, state.selected_day_key, slot_id) is None:
            return self._refuse(state, "slot_not_in_day", day_key=state.selected_day_key, slot_id=slot_id)

        return SelectionResult(updated_state=replace(state, selected_slot_id=slot_id), accepted=True)

    def select_session_type(self, state: SelectionState, option: SessionTypeOption | None) -> SelectionResult:
        return SelectionResult(updated_state=replace(state, selected_session_type=option), accepted=True)

    def select_timezone(self, state: SelectionState, option: TimezoneOption | str | None) -> SelectionResult:
        return SelectionResult(updated_state=replace(state, selected_timezone=option), accepted=True)

    def set_notes(self, state: SelectionState, text: str) -> SelectionResult:
        return SelectionResult(updated_state=replace(state, notes=text), accepted=True)

    def apply_agenda_template(self, state: SelectionState, template: AgendaTemplate) -> SelectionResult:
        """Prefill notes from an agenda template and remember which one was used."""
        return SelectionResult(
            updated_state=replace(state, notes=template.notes_text(), selected_template_id=template.id),
            accepted=True,
        )

    def reconcile(self, state: SelectionState) -> SelectionState:
        """Drop a selected day or slot that the current availability no longer contains."""
        if state.selected_day_key is None:
            return state
        if not self._day_index.get(state.selected_day_key):
            return replace(state, selected_day_key=None, selected_slot_id=None)
        if state.selected_slot_id is not None and find_slot(
            self._day_index, state.selected_day_key, state.selected_slot_id
        ) is None:
            return replace(state, selected_slot_id=None)
        return state

    def _refuse(self, state: SelectionState, reason: str, **context: str | None) -> SelectionResult:
        self._logger.info("Selection refused", extra={"reason": reason, **context})
        return SelectionResult(updated_state=state, accepted=False, reason=reason)
