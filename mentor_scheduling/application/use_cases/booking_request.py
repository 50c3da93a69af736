from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from mentor_scheduling.application.use_cases.day_grouping import DayIndex, find_slot
from mentor_scheduling.application.utils.date_utils import iso_utc
from mentor_scheduling.domain.entities.booking_request import BookingRequest
from mentor_scheduling.domain.entities.mentor import MentorRef
from mentor_scheduling.domain.entities.selection_state import SelectionState
from mentor_scheduling.domain.entities.service_catalog import AgendaTemplate, TimezoneOption

BOOKING_SOURCE = "mentorship_session_scheduler"


class BookingRequestBuilder:
    def __init__(self, day_index: DayIndex, agenda_templates: Iterable[AgendaTemplate] = ()) -> None:
        self._day_index = day_index
        self._templates = {template.id: template for template in agenda_templates}
        self._logger = logging.getLogger(__name__)

    def build(self, state: SelectionState, mentor: MentorRef) -> BookingRequest | None:
        """Return the booking request, or None while slot or session type is missing."""
        slot = find_slot(self._day_index, state.selected_day_key, state.selected_slot_id)
        if slot is None or state.selected_session_type is None:
            return None

        timezone = state.selected_timezone
        if isinstance(timezone, TimezoneOption):
            timezone = timezone.value

        request = BookingRequest(
            mentor_id=mentor.id,
            mentor_profile_id=mentor.profile_id,
            mentor=mentor,
            slot=slot,
            session_type=state.selected_session_type,
            timezone=timezone,
            notes=state.notes,
            template=self._templates.get(state.selected_template_id) if state.selected_template_id else None,
        )
        self._logger.info(
            "Booking request built",
            extra={"mentor_id": mentor.id, "slot_id": slot.id, "session_type": state.selected_session_type.id},
        )
        return request


def booking_request_payload(request: BookingRequest) -> dict[str, Any]:
    """JSON body for POST /mentoring/sessions."""
    payload: dict[str, Any] = {
        "mentorId": request.mentor_id,
        "mentorProfileId": request.mentor_profile_id,
        "slotId": request.slot.id,
        "scheduledAt": iso_utc(request.slot.start),
        "endsAt": iso_utc(request.slot.end),
        "timezone": request.timezone,
        "sessionTypeId": request.session_type.id,
        "durationMinutes": request.duration_minutes,
        "topic": request.session_type.label,
        "notes": request.notes,
        "agenda": request.agenda,
        "templateId": request.template.id if request.template is not None else None,
        "meetingType": request.meeting_type,
        "format": request.slot.format,
        "meetingUrl": request.slot.meeting_url,
        "source": BOOKING_SOURCE,
    }
    return {key: value for key, value in payload.items() if value is not None}
