from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mentor_scheduling.domain.entities.mentor import MentorRef


def first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key that is set to something other than None or ''."""
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def _availability_block(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    block = payload.get("availability")
    return block if isinstance(block, Mapping) else {}


def mentor_from_payload(payload: Mapping[str, Any]) -> MentorRef:
    mentor_id = first_present(payload, "id", "mentorId", "mentor_id", "userId")
    if mentor_id is None:
        raise ValueError("mentor reference requires an identifier")
    profile_id = first_present(payload, "profileId", "mentorProfileId", "profile_id", "mentor_profile_id")
    timezone = first_present(_availability_block(payload), "timezone") or first_present(
        payload, "timezone", "preferredTimezone"
    )
    return MentorRef(
        id=str(mentor_id),
        profile_id=str(profile_id) if profile_id is not None else None,
        name=first_present(payload, "name", "displayName"),
        timezone=str(timezone) if timezone is not None else None,
        preferred_format=first_present(payload, "preferredFormat"),
        payload=dict(payload),
    )


def published_slots(mentor: MentorRef) -> list[Any]:
    """Slots embedded in the mentor record: availability.slots, else availableSlots."""
    payload = mentor.payload if isinstance(mentor.payload, Mapping) else {}
    slots = _availability_block(payload).get("slots")
    if slots is None:
        slots = payload.get("availableSlots")
    return list(slots) if isinstance(slots, (list, tuple)) else []
