from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union


@dataclass(frozen=True)
class SlotRecord:
    start: datetime | str | int | float | None
    end: datetime | str | int | float | None = None
    id: str | None = None
    label: str | None = None
    timezone: str | None = None
    meeting_url: str | None = None
    format: str | None = None  # virtual, in_person, ...
    duration_minutes: int | None = None
    capacity: int | None = None
    metadata: Any = None


# Either a bare instant (implicit zero-length slot) or a structured record.
AvailabilityInput = Union[str, datetime, int, float, SlotRecord, Mapping[str, Any]]


@dataclass(frozen=True)
class NormalizedSlot:
    id: str
    start: datetime
    end: datetime  # not reordered: may precede start if the caller supplied it that way
    label: str
    metadata: Any = None
    timezone: str | None = None  # zone the mentor published the slot in
    meeting_url: str | None = None
    format: str | None = None
    duration_minutes: int | None = None
    capacity: int | None = None
