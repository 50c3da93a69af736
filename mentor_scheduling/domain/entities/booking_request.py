from __future__ import annotations

from dataclasses import dataclass

from mentor_scheduling.domain.entities.mentor import MentorRef
from mentor_scheduling.domain.entities.service_catalog import AgendaTemplate, SessionTypeOption
from mentor_scheduling.domain.entities.slot import NormalizedSlot

DEFAULT_MEETING_TYPE = "virtual"


@dataclass(frozen=True)
class BookingRequest:
    mentor_id: str
    mentor_profile_id: str | None
    mentor: MentorRef
    slot: NormalizedSlot
    session_type: SessionTypeOption
    timezone: str | None
    notes: str
    template: AgendaTemplate | None = None

    @property
    def duration_minutes(self) -> int | None:
        if self.session_type.duration:
            return self.session_type.duration
        if self.slot.duration_minutes:
            return self.slot.duration_minutes
        seconds = (self.slot.end - self.slot.start).total_seconds()
        return int(seconds // 60) if seconds > 0 else None

    @property
    def meeting_type(self) -> str:
        return self.slot.format or self.mentor.preferred_format or DEFAULT_MEETING_TYPE

    @property
    def agenda(self) -> str | None:
        """Typed notes win over the template's agenda."""
        text = self.notes.strip()
        if text:
            return text
        if self.template is not None:
            return self.template.notes_text() or None
        return None
