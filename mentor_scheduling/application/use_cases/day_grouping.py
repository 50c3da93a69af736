from __future__ import annotations

from collections.abc import Iterable
from zoneinfo import ZoneInfo

from mentor_scheduling.application.utils.date_utils import day_key
from mentor_scheduling.domain.entities.slot import NormalizedSlot

DayIndex = dict[str, tuple[NormalizedSlot, ...]]


def group_by_day(slots: Iterable[NormalizedSlot], timezone: ZoneInfo) -> DayIndex:
    """
    Partition slots by local calendar day (YYYY-MM-DD).
    Buckets are ascending by start; equal starts keep input order.
    """
    ordered = sorted(slots, key=lambda slot: slot.start)
    buckets: dict[str, list[NormalizedSlot]] = {}
    for slot in ordered:
        buckets.setdefault(day_key(slot.start, timezone), []).append(slot)
    return {key: tuple(bucket) for key, bucket in buckets.items()}


def find_slot(index: DayIndex, key: str | None, slot_id: str | None) -> NormalizedSlot | None:
    if key is None or slot_id is None:
        return None
    for slot in index.get(key, ()):
        if slot.id == slot_id:
            return slot
    return None
