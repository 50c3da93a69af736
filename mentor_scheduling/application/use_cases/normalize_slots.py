from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from mentor_scheduling.application.utils.date_utils import (
    format_range_label,
    format_time_label,
    iso_utc,
    parse_instant,
)
from mentor_scheduling.application.utils.payload import first_present
from mentor_scheduling.domain.entities.slot import AvailabilityInput, NormalizedSlot, SlotRecord

logger = logging.getLogger(__name__)

START_KEYS = ("start", "startsAt", "starts_at", "begin", "beginAt")
END_KEYS = ("end", "endsAt", "ends_at", "finish", "finishAt")
ID_KEYS = ("id", "slotId", "slot_id")
LABEL_KEYS = ("label", "title")
TIMEZONE_KEYS = ("timezone", "timeZone")
MEETING_URL_KEYS = ("meetingUrl", "meeting_url", "url")
FORMAT_KEYS = ("format", "type", "mode")
DURATION_KEYS = ("durationMinutes", "duration_minutes", "duration")
CAPACITY_KEYS = ("capacity", "remainingCapacity", "remaining_capacity")


def _as_text(value: Any) -> str | None:
    return str(value) if value is not None else None


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_record(value: SlotRecord | Mapping[str, Any]) -> SlotRecord:
    if isinstance(value, SlotRecord):
        return value
    return SlotRecord(
        start=first_present(value, *START_KEYS),
        end=first_present(value, *END_KEYS),
        id=first_present(value, *ID_KEYS),
        label=_as_text(first_present(value, *LABEL_KEYS)),
        timezone=_as_text(first_present(value, *TIMEZONE_KEYS)),
        meeting_url=_as_text(first_present(value, *MEETING_URL_KEYS)),
        format=_as_text(first_present(value, *FORMAT_KEYS)),
        duration_minutes=_as_int(first_present(value, *DURATION_KEYS)),
        capacity=_as_int(first_present(value, *CAPACITY_KEYS)),
        metadata=value.get("metadata"),
    )


def _record_timezone(record: SlotRecord) -> str | None:
    if record.timezone:
        return record.timezone
    metadata = record.metadata if isinstance(record.metadata, Mapping) else {}
    zone = metadata.get("timezone")
    return zone if isinstance(zone, str) and zone else None


def derive_slot_id(start: datetime, end: datetime) -> str:
    return f"{iso_utc(start)}-{iso_utc(end)}"


def normalize(
    value: AvailabilityInput,
    timezone: ZoneInfo,
    fallback_timezone: str | None = None,
) -> NormalizedSlot | None:
    """
    Convert one availability entry into a NormalizedSlot.
    Returns None when the start instant cannot be parsed.
    Slots that name no zone of their own are tagged with fallback_timezone.
    """
    if isinstance(value, (SlotRecord, Mapping)):
        record = _as_record(value)
    else:
        start = parse_instant(value, timezone)
        if start is None:
            return None
        return NormalizedSlot(
            id=derive_slot_id(start, start),
            start=start,
            end=start,
            label=format_time_label(start, timezone),
            timezone=fallback_timezone,
        )

    start = parse_instant(record.start, timezone)
    if start is None:
        return None

    end = parse_instant(record.end, timezone) if record.end is not None else None
    if end is None:
        end = start

    return NormalizedSlot(
        id=str(record.id) if record.id is not None else derive_slot_id(start, end),
        start=start,
        end=end,
        label=record.label if record.label is not None else format_range_label(start, end, timezone),
        metadata=record.metadata,
        timezone=_record_timezone(record) or fallback_timezone,
        meeting_url=record.meeting_url,
        format=record.format,
        duration_minutes=record.duration_minutes,
        capacity=record.capacity,
    )


def normalize_all(
    values: Iterable[AvailabilityInput],
    timezone: ZoneInfo,
    fallback_timezone: str | None = None,
) -> list[NormalizedSlot]:
    """Normalize a full availability snapshot, dropping unparseable entries and repeated ids."""
    slots: list[NormalizedSlot] = []
    seen: set[str] = set()
    for index, value in enumerate(values or ()):
        slot = normalize(value, timezone, fallback_timezone)
        if slot is None:
            logger.debug("Dropped unparseable availability entry", extra={"index": index})
            continue
        if slot.id in seen:
            logger.debug("Dropped duplicate availability entry", extra={"index": index, "slot_id": slot.id})
            continue
        seen.add(slot.id)
        slots.append(slot)
    return slots


def drop_past_slots(slots: Iterable[NormalizedSlot], now: datetime) -> list[NormalizedSlot]:
    return [slot for slot in slots if slot.start > now]
