from __future__ import annotations

from dataclasses import dataclass

from mentor_scheduling.domain.entities.service_catalog import SessionTypeOption, TimezoneOption


@dataclass(frozen=True)
class SelectionState:
    selected_day_key: str | None = None  # YYYY-MM-DD
    selected_slot_id: str | None = None  # always a slot of selected_day_key, or None
    selected_session_type: SessionTypeOption | None = None
    selected_timezone: TimezoneOption | str | None = None
    notes: str = ""
    selected_template_id: str | None = None  # agenda template that last prefilled notes
