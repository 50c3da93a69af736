from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MentorRef:
    id: str
    profile_id: str | None = None
    name: str | None = None
    timezone: str | None = None  # availability.timezone, timezone or preferredTimezone
    preferred_format: str | None = None
    payload: Any = None  # raw mentor record
