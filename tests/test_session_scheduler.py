"""
Tests for the per-attempt SessionScheduler.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from mentor_scheduling.application.use_cases.session_scheduler import SessionScheduler
from mentor_scheduling.domain.entities.service_catalog import TimezoneOption
from mentor_scheduling.infrastructure.mentoring.mock_sink import MockScheduleSink

NOW = datetime(2024, 6, 1, 0, 0, tzinfo=timezone.utc)
MENTOR = {"id": "mentor-1", "profileId": "profile-1", "name": "Ada"}
NINE_AM_ID = "2024-06-03T09:00:00.000Z-2024-06-03T09:00:00.000Z"


def _scheduler(**overrides) -> SessionScheduler:
    params = {
        "mentor": MENTOR,
        "availability": ["2024-06-03T09:00:00Z", "2024-06-03T10:00:00Z"],
        "session_types": [{"id": "intro", "label": "Intro call"}],
        "scheduling_window_days": 21,
        "now": NOW,
        "timezone": "UTC",
    }
    params.update(overrides)
    return SessionScheduler(**params)


def test_happy_path_builds_request():
    scheduler = _scheduler()

    assert scheduler.state.selected_session_type.id == "intro"
    assert scheduler.select_day("2024-06-03").accepted
    assert scheduler.select_slot(NINE_AM_ID).accepted

    request = scheduler.build_request()

    assert request is not None
    assert request.slot.start == datetime(2024, 6, 3, 9, tzinfo=timezone.utc)
    assert request.session_type.id == "intro"
    assert request.mentor_id == "mentor-1"
    assert request.mentor_profile_id == "profile-1"


def test_build_is_gated_on_slot_and_session_type():
    scheduler = _scheduler()
    scheduler.select_day("2024-06-03")
    assert scheduler.build_request() is None

    scheduler.select_slot(NINE_AM_ID)
    scheduler.select_session_type(None)
    assert scheduler.build_request() is None

    scheduler.select_session_type("intro")
    assert scheduler.build_request() is not None


def test_unknown_session_type_id_is_refused():
    scheduler = _scheduler()

    result = scheduler.select_session_type("masterclass")

    assert result.accepted is False
    assert result.reason == "unknown_session_type"
    assert scheduler.state.selected_session_type.id == "intro"


def test_calendar_week_and_paging():
    scheduler = _scheduler(availability=["2024-06-03T09:00:00Z", "2024-06-03T10:00:00Z", "2024-06-10T09:00:00Z"])

    week = scheduler.calendar_days()
    assert week[0].date == date(2024, 6, 1)
    assert [day.slot_count for day in week] == [0, 0, 2, 0, 0, 0, 0]

    next_week = scheduler.page_forward()
    assert next_week[0].date == date(2024, 6, 8)
    assert next_week[2].slot_count == 1

    previous_week = scheduler.page_backward()
    assert previous_week == week


def test_derived_data_is_memoized_and_matches_fresh_computation():
    availability = ["2024-06-03T09:00:00Z", "2024-06-04T09:00:00Z"]
    scheduler = _scheduler(availability=availability)

    assert scheduler.day_index is scheduler.day_index
    assert scheduler.slots is scheduler.slots
    assert scheduler.calendar_days() is scheduler.calendar_days()
    assert scheduler.day_index == _scheduler(availability=list(availability)).day_index


def test_replacing_availability_rebuilds_and_reconciles():
    scheduler = _scheduler()
    scheduler.select_day("2024-06-03")
    scheduler.select_slot(NINE_AM_ID)
    old_index = scheduler.day_index

    state = scheduler.replace_availability(["2024-06-03T10:00:00Z", "2024-06-05T09:00:00Z"])

    assert scheduler.day_index is not old_index
    assert state.selected_day_key == "2024-06-03"
    assert state.selected_slot_id is None
    assert [day.slot_count for day in scheduler.calendar_days()][2:5] == [1, 0, 1]

    scheduler.replace_availability([])
    assert scheduler.state.selected_day_key is None
    assert scheduler.day_index == {}


def test_malformed_entries_are_dropped():
    scheduler = _scheduler(availability=["not-a-date", "2024-06-03T09:00:00Z"])

    assert len(scheduler.slots) == 1


def test_hide_past_slots():
    scheduler = _scheduler(
        availability=["2024-05-31T09:00:00Z", "2024-06-03T09:00:00Z"],
        hide_past_slots=True,
    )

    assert [slot.id for slot in scheduler.slots] == [NINE_AM_ID]


def test_timezone_options_are_built_when_not_supplied():
    scheduler = _scheduler(default_timezone="Europe/Berlin", viewer_timezone="America/Denver")

    assert [option.value for option in scheduler.timezone_options] == ["Europe/Berlin", "America/Denver"]
    assert scheduler.state.selected_timezone == TimezoneOption(value="Europe/Berlin", label="Europe/Berlin")


def test_select_timezone_resolves_known_values():
    options = [TimezoneOption(value="Europe/Berlin", label="Berlin"), TimezoneOption(value="UTC", label="UTC")]
    scheduler = _scheduler(timezone_options=options)

    assert scheduler.state.selected_timezone == options[0]
    scheduler.select_timezone("UTC")
    assert scheduler.state.selected_timezone == options[1]
    scheduler.select_timezone("Mars/Olympus")
    assert scheduler.state.selected_timezone == "Mars/Olympus"


def test_agenda_templates_include_mentor_templates():
    mentor = {**MENTOR, "sessionTemplates": [{"id": "portfolio", "title": "Portfolio", "agenda": ["Walkthrough"]}]}
    scheduler = _scheduler(mentor=mentor)

    assert scheduler.agenda_templates[0].id == "portfolio"
    assert scheduler.apply_agenda_template("portfolio").accepted
    assert scheduler.state.notes == "Walkthrough"
    assert scheduler.apply_agenda_template("nope").reason == "unknown_agenda_template"


def test_submit_hands_off_and_discards_selection():
    sink = MockScheduleSink()
    scheduler = _scheduler()
    assert scheduler.submit(sink) is None

    scheduler.select_day("2024-06-03")
    scheduler.select_slot(NINE_AM_ID)
    scheduler.set_notes("Career switch")

    session_id = scheduler.submit(sink)

    assert session_id == "mock_session_1"
    assert sink.sessions[session_id].notes == "Career switch"
    assert scheduler.state.selected_slot_id is None
    assert scheduler.state.notes == ""


def test_close_discards_selection():
    scheduler = _scheduler()
    scheduler.select_day("2024-06-03")
    scheduler.set_notes("draft")

    scheduler.close()

    assert scheduler.state.selected_day_key is None
    assert scheduler.state.notes == ""


def test_invalid_configuration_is_rejected():
    with pytest.raises(ValueError):
        _scheduler(scheduling_window_days=-3)
    with pytest.raises(ValueError):
        _scheduler(mentor={"name": "No id"})


def test_naive_now_is_read_in_engine_timezone():
    scheduler = _scheduler(
        availability=["2024-05-31T09:00:00Z", "2024-06-03T09:00:00Z"],
        now=datetime(2024, 6, 1),
        hide_past_slots=True,
    )

    assert scheduler.now == datetime(2024, 6, 1, tzinfo=ZoneInfo("UTC"))
    assert [slot.id for slot in scheduler.slots] == [NINE_AM_ID]


def test_naive_now_late_in_the_day_keeps_today_bookable():
    """23:30 wall-clock in a +14 zone is still the same local day."""
    kiritimati = ZoneInfo("Pacific/Kiritimati")
    scheduler = _scheduler(
        availability=["2024-05-01T10:00:00", "2024-05-01T23:45:00"],
        now=datetime(2024, 5, 1, 23, 30),
        timezone=kiritimati,
    )

    assert scheduler.now.utcoffset() == timedelta(hours=14)
    assert scheduler.calendar_days()[0].key == "2024-05-01"
    assert scheduler.select_day("2024-05-01").accepted


def test_unusable_now_is_rejected():
    with pytest.raises(ValueError):
        _scheduler(now="yesterday")


def test_calendar_cache_holds_only_the_visible_week():
    scheduler = _scheduler()
    first = scheduler.calendar_days()

    scheduler.page_forward()
    scheduler.page_backward()

    assert scheduler.calendar_days() is not first
    assert scheduler.calendar_days() is scheduler.calendar_days()
    assert scheduler.calendar_days() == first


def test_mentor_published_slots_and_timezone_are_used_as_fallback():
    mentor = {
        **MENTOR,
        "availability": {
            "timezone": "Europe/Lisbon",
            "slots": [
                {"id": "embedded", "start": "2024-06-03T09:00:00Z", "meetingUrl": "https://meet.example.com/ada"},
                {"id": "tokyo", "start": "2024-06-04T09:00:00Z", "timezone": "Asia/Tokyo"},
            ],
        },
    }
    scheduler = _scheduler(mentor=mentor, availability=None)

    assert [slot.id for slot in scheduler.slots] == ["embedded", "tokyo"]
    assert [slot.timezone for slot in scheduler.slots] == ["Europe/Lisbon", "Asia/Tokyo"]
    assert [option.value for option in scheduler.timezone_options] == ["Europe/Lisbon", "Asia/Tokyo"]
    assert scheduler.state.selected_timezone == TimezoneOption(value="Europe/Lisbon", label="Europe/Lisbon")

    scheduler.select_day("2024-06-03")
    scheduler.select_slot("embedded")
    scheduler.apply_agenda_template("kickoff")
    request = scheduler.build_request()

    assert request.slot.meeting_url == "https://meet.example.com/ada"
    assert request.template.id == "kickoff"
    assert request.timezone == "Europe/Lisbon"
