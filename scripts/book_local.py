#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local booking harness (no HTTP, no mentoring API).

Usage:
  python3 scripts/book_local.py [availability.json]

What it does:
- Loads availability from a JSON list (or generates a sample week)
- Drives the same SessionScheduler the API uses
- Submits finished requests to the in-memory MockScheduleSink
"""

import json
from datetime import datetime, timedelta, timezone

from mentor_scheduling.application.use_cases.session_scheduler import SessionScheduler
from mentor_scheduling.core.config import settings
from mentor_scheduling.core.logging_config import configure_logging
from mentor_scheduling.infrastructure.mentoring.mock_sink import MockScheduleSink

SAMPLE_SESSION_TYPES = [
    {"id": "intro", "label": "Intro call", "duration": 30},
    {"id": "deep_dive", "label": "Deep dive", "duration": 60, "price": 120},
]


def _sample_availability() -> list[str]:
    start = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0) + timedelta(days=1)
    return [(start + timedelta(days=day, hours=hour)).isoformat() for day in range(0, 10, 2) for hour in (0, 2)]


def _load_availability(argv: list[str]) -> list:
    if len(argv) > 1:
        return json.loads(Path(argv[1]).read_text(encoding="utf-8"))
    return _sample_availability()


def _print_week(scheduler: SessionScheduler) -> None:
    print("\n--- Week ---")
    for day in scheduler.calendar_days():
        marker = "*" if day.key == scheduler.state.selected_day_key else " "
        status = "open" if day.selectable else "closed"
        print(f"{marker} {day.key}  slots={day.slot_count}  {status}")


def _print_state(scheduler: SessionScheduler) -> None:
    state = scheduler.state
    print("\n--- Selection ---")
    print(f"day: {state.selected_day_key}")
    print(f"slot: {state.selected_slot_id}")
    print(f"session type: {state.selected_session_type.id if state.selected_session_type else None}")
    print(f"timezone: {state.selected_timezone}")
    print(f"notes: {state.notes!r}")


def _print_help() -> None:
    print("Commands:")
    print("  /next, /prev          -> page the week")
    print("  /day YYYY-MM-DD       -> select a day (lists its slots)")
    print("  /slot <id>            -> select a slot of the selected day")
    print("  /type <id>            -> select a session type")
    print("  /tz <IANA name>       -> select a timezone")
    print("  /template <id>        -> prefill notes from an agenda template")
    print("  /notes <text>         -> set notes")
    print("  /book                 -> submit to the mock sink")
    print("  /reset, /quit")


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    sink = MockScheduleSink()
    scheduler = SessionScheduler(
        mentor={"id": "local_mentor", "profileId": "local_profile", "name": "Local Mentor"},
        availability=_load_availability(sys.argv),
        session_types=SAMPLE_SESSION_TYPES,
        default_timezone=settings.DEFAULT_TIMEZONE,
        scheduling_window_days=settings.SCHEDULING_WINDOW_DAYS,
        timezone=settings.LOCAL_TIMEZONE,
        hide_past_slots=settings.HIDE_PAST_SLOTS,
    )
    print("\nLocal Booking Harness")
    print("-" * 60)
    _print_help()
    _print_week(scheduler)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return
        if not line:
            continue

        cmd, _, arg = line.partition(" ")
        cmd = cmd.lower()
        arg = arg.strip()

        if cmd in ("/quit", "/exit"):
            scheduler.close()
            print("Bye!")
            return
        if cmd == "/help":
            _print_help()
            continue
        if cmd == "/next":
            scheduler.page_forward()
            _print_week(scheduler)
            continue
        if cmd == "/prev":
            scheduler.page_backward()
            _print_week(scheduler)
            continue
        if cmd == "/reset":
            scheduler.reset()
            _print_state(scheduler)
            continue
        if cmd == "/book":
            session_id = scheduler.submit(sink)
            if session_id is None:
                print("Pick a slot and a session type first.")
            else:
                print(f"Booked: {session_id}")
            continue

        if cmd == "/day":
            result = scheduler.select_day(arg)
            if result.accepted:
                for slot in scheduler.slots_for_day(arg):
                    print(f"  {slot.id}  {slot.label}")
        elif cmd == "/slot":
            result = scheduler.select_slot(arg)
        elif cmd == "/type":
            result = scheduler.select_session_type(arg)
        elif cmd == "/tz":
            result = scheduler.select_timezone(arg)
        elif cmd == "/template":
            result = scheduler.apply_agenda_template(arg)
        elif cmd == "/notes":
            result = scheduler.set_notes(arg)
        else:
            print("Unknown command. Type /help.")
            continue

        if not result.accepted:
            print(f"Refused: {result.reason}")
        _print_state(scheduler)


if __name__ == "__main__":
    main()
