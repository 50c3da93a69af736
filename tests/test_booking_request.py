"""
Tests for booking request assembly.
"""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from mentor_scheduling.application.use_cases.booking_request import (
    BookingRequestBuilder,
    booking_request_payload,
)
from mentor_scheduling.application.use_cases.day_grouping import group_by_day
from mentor_scheduling.application.use_cases.normalize_slots import normalize_all
from mentor_scheduling.application.utils.payload import mentor_from_payload, published_slots
from mentor_scheduling.domain.entities.mentor import MentorRef
from mentor_scheduling.domain.entities.selection_state import SelectionState
from mentor_scheduling.domain.entities.service_catalog import AgendaTemplate, SessionTypeOption, TimezoneOption

UTC = ZoneInfo("UTC")
INDEX = group_by_day(
    normalize_all(
        [
            {"id": "slot-A", "start": "2024-06-03T09:00:00Z", "end": "2024-06-03T09:45:00Z"},
            {"id": "slot-B", "start": "2024-06-04T09:00:00Z"},
        ],
        UTC,
    ),
    UTC,
)
MENTOR = MentorRef(id="mentor-7", profile_id="profile-70", name="Ada")
INTRO = SessionTypeOption(id="intro", label="Intro call")


def test_missing_session_type_gives_none():
    state = SelectionState(selected_day_key="2024-06-03", selected_slot_id="slot-A")

    assert BookingRequestBuilder(INDEX).build(state, MENTOR) is None


def test_missing_slot_gives_none():
    state = SelectionState(selected_day_key="2024-06-03", selected_session_type=INTRO)

    assert BookingRequestBuilder(INDEX).build(state, MENTOR) is None


def test_unresolvable_slot_gives_none():
    state = SelectionState(selected_day_key="2024-06-03", selected_slot_id="slot-B", selected_session_type=INTRO)

    assert BookingRequestBuilder(INDEX).build(state, MENTOR) is None


def test_complete_selection_builds_request():
    state = SelectionState(
        selected_day_key="2024-06-03",
        selected_slot_id="slot-A",
        selected_session_type=INTRO,
        selected_timezone=TimezoneOption(value="Europe/Berlin", label="Berlin"),
        notes="  keep my whitespace  ",
    )

    request = BookingRequestBuilder(INDEX).build(state, MENTOR)

    assert request is not None
    assert request.mentor_id == "mentor-7"
    assert request.mentor_profile_id == "profile-70"
    assert request.mentor is MENTOR
    assert request.slot.id == "slot-A"
    assert request.slot.start == datetime(2024, 6, 3, 9, tzinfo=timezone.utc)
    assert request.session_type == INTRO
    assert request.timezone == "Europe/Berlin"
    assert request.notes == "  keep my whitespace  "
    assert request.duration_minutes == 45


def test_raw_timezone_string_passes_through():
    state = SelectionState(
        selected_day_key="2024-06-03",
        selected_slot_id="slot-A",
        selected_session_type=INTRO,
        selected_timezone="Not/AZone",
    )

    assert BookingRequestBuilder(INDEX).build(state, MENTOR).timezone == "Not/AZone"


def test_payload_shape():
    state = SelectionState(
        selected_day_key="2024-06-03",
        selected_slot_id="slot-A",
        selected_session_type=SessionTypeOption(id="deep_dive", label="Deep dive", duration=60),
        selected_timezone="UTC",
        notes="Portfolio review",
    )
    request = BookingRequestBuilder(INDEX).build(state, MENTOR)

    assert booking_request_payload(request) == {
        "mentorId": "mentor-7",
        "mentorProfileId": "profile-70",
        "slotId": "slot-A",
        "scheduledAt": "2024-06-03T09:00:00.000Z",
        "endsAt": "2024-06-03T09:45:00.000Z",
        "timezone": "UTC",
        "sessionTypeId": "deep_dive",
        "durationMinutes": 60,
        "topic": "Deep dive",
        "notes": "Portfolio review",
        "agenda": "Portfolio review",
        "meetingType": "virtual",
        "source": "mentorship_session_scheduler",
    }


def test_mentor_from_payload():
    mentor = mentor_from_payload({"mentorId": 12, "mentorProfileId": 99, "name": "Grace", "headline": "CTO"})

    assert mentor.id == "12"
    assert mentor.profile_id == "99"
    assert mentor.name == "Grace"
    assert mentor.payload["headline"] == "CTO"
    assert mentor.timezone is None
    assert mentor.preferred_format is None


def test_mentor_timezone_fallback_chain():
    """availability.timezone wins over timezone, which wins over preferredTimezone."""
    assert mentor_from_payload(
        {"id": 1, "availability": {"timezone": "Asia/Tokyo"}, "timezone": "Europe/Paris", "preferredTimezone": "UTC"}
    ).timezone == "Asia/Tokyo"
    assert mentor_from_payload({"id": 1, "timezone": "Europe/Paris", "preferredTimezone": "UTC"}).timezone == "Europe/Paris"
    assert mentor_from_payload({"id": 1, "preferredTimezone": "America/Denver"}).timezone == "America/Denver"


def test_published_slots_fallback():
    nested = mentor_from_payload({"id": 1, "availability": {"slots": ["2024-06-03T09:00:00Z"]}, "availableSlots": ["x"]})
    flat = mentor_from_payload({"id": 1, "availableSlots": ["2024-06-04T09:00:00Z"]})

    assert published_slots(nested) == ["2024-06-03T09:00:00Z"]
    assert published_slots(flat) == ["2024-06-04T09:00:00Z"]
    assert published_slots(mentor_from_payload({"id": 1})) == []


def test_payload_carries_meeting_details_and_template():
    index = group_by_day(
        normalize_all(
            [
                {
                    "id": "slot-C",
                    "start": "2024-06-05T15:00:00Z",
                    "meetingUrl": "https://meet.example.com/ada",
                    "format": "video",
                    "durationMinutes": 50,
                }
            ],
            UTC,
        ),
        UTC,
    )
    template = AgendaTemplate(id="kickoff", title="Kickoff", agenda=("Goals", "Blockers"))
    state = SelectionState(
        selected_day_key="2024-06-05",
        selected_slot_id="slot-C",
        selected_session_type=INTRO,
        selected_template_id="kickoff",
    )

    request = BookingRequestBuilder(index, [template]).build(state, MENTOR)
    payload = booking_request_payload(request)

    assert request.template == template
    assert payload["templateId"] == "kickoff"
    assert payload["agenda"] == "Goals\nBlockers"
    assert payload["meetingType"] == "video"
    assert payload["format"] == "video"
    assert payload["meetingUrl"] == "https://meet.example.com/ada"
    assert payload["durationMinutes"] == 50


def test_meeting_type_falls_back_to_mentor_preference():
    mentor = MentorRef(id="mentor-7", preferred_format="in_person")
    state = SelectionState(selected_day_key="2024-06-04", selected_slot_id="slot-B", selected_session_type=INTRO)

    payload = booking_request_payload(BookingRequestBuilder(INDEX).build(state, mentor))

    assert payload["meetingType"] == "in_person"
    assert "format" not in payload
    assert "meetingUrl" not in payload
    assert "templateId" not in payload
    assert "agenda" not in payload
