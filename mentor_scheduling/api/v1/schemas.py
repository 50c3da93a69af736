from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from mentor_scheduling.core.config import settings


def _default_window_days() -> int:
    return settings.SCHEDULING_WINDOW_DAYS


class TimezoneOptionSchema(BaseModel):
    value: str
    label: str


class SlotSchema(BaseModel):
    id: str
    start: datetime
    end: datetime
    label: str
    metadata: Any = None
    timezone: str | None = None
    meeting_url: str | None = None
    format: str | None = None
    duration_minutes: int | None = None
    capacity: int | None = None


class CalendarDaySchema(BaseModel):
    date: date
    key: str
    label: str
    has_slots: bool
    slot_count: int
    selectable: bool
    slots: list[SlotSchema] = Field(default_factory=list)


class CalendarRequestSchema(BaseModel):
    availability: list[str | int | float | dict[str, Any]] = Field(default_factory=list)
    anchor_date: date | None = None
    week_offset: int = 0
    now: datetime | None = None
    timezone: str = Field(default_factory=lambda: settings.LOCAL_TIMEZONE)
    default_timezone: str | None = Field(default_factory=lambda: settings.DEFAULT_TIMEZONE)
    viewer_timezone: str | None = None
    scheduling_window_days: int | None = Field(default_factory=_default_window_days, ge=0)


class CalendarResponseSchema(BaseModel):
    anchor_date: date
    days: list[CalendarDaySchema]
    timezone_options: list[TimezoneOptionSchema]


class SelectionSchema(BaseModel):
    day_key: str | None = None
    slot_id: str | None = None
    session_type_id: str | None = None
    timezone: str | None = None
    agenda_template_id: str | None = None
    notes: str | None = None


class ScheduleRequestSchema(BaseModel):
    mentor: dict[str, Any]
    availability: list[str | int | float | dict[str, Any]] | None = None  # None: slots published on the mentor
    session_types: list[str | dict[str, Any]] = Field(default_factory=list)
    timezone_options: list[TimezoneOptionSchema] = Field(default_factory=list)
    default_timezone: str | None = Field(default_factory=lambda: settings.DEFAULT_TIMEZONE)
    viewer_timezone: str | None = None
    now: datetime | None = None
    timezone: str = Field(default_factory=lambda: settings.LOCAL_TIMEZONE)
    scheduling_window_days: int | None = Field(default_factory=_default_window_days, ge=0)
    selection: SelectionSchema


class ScheduleResponseSchema(BaseModel):
    session_id: str
    request: dict[str, Any]
