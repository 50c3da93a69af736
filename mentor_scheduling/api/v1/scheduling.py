import logging
from collections.abc import Callable
from zoneinfo import ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException

from mentor_scheduling.api.v1.schemas import (
    CalendarDaySchema,
    CalendarRequestSchema,
    CalendarResponseSchema,
    ScheduleRequestSchema,
    ScheduleResponseSchema,
    SelectionSchema,
    SlotSchema,
    TimezoneOptionSchema,
)
from mentor_scheduling.application.exceptions import ScheduleContractError, ScheduleUpstreamError
from mentor_scheduling.application.ports.schedule_sink import ScheduleSinkPort
from mentor_scheduling.application.use_cases.booking_request import booking_request_payload
from mentor_scheduling.application.use_cases.selection import SelectionResult
from mentor_scheduling.application.use_cases.session_scheduler import SessionScheduler
from mentor_scheduling.application.utils.date_utils import format_day_label
from mentor_scheduling.domain.entities.service_catalog import TimezoneOption
from mentor_scheduling.wiring.dependencies import get_schedule_sink, get_scheduler_factory

router = APIRouter()
logger = logging.getLogger(__name__)


def _require(result: SelectionResult) -> None:
    if not result.accepted:
        raise HTTPException(status_code=422, detail={"reason": result.reason})


def _replay_selection(scheduler: SessionScheduler, selection: SelectionSchema) -> None:
    """Apply the mentee's choices in the order the booking flow offers them."""
    if selection.day_key is not None:
        _require(scheduler.select_day(selection.day_key))
    if selection.slot_id is not None:
        _require(scheduler.select_slot(selection.slot_id))
    if selection.session_type_id is not None:
        _require(scheduler.select_session_type(selection.session_type_id))
    if selection.timezone is not None:
        _require(scheduler.select_timezone(selection.timezone))
    if selection.agenda_template_id is not None:
        _require(scheduler.apply_agenda_template(selection.agenda_template_id))
    if selection.notes:
        _require(scheduler.set_notes(selection.notes))


@router.post("/calendar", response_model=CalendarResponseSchema)
def calendar(
    req: CalendarRequestSchema,
    scheduler_factory: Callable[..., SessionScheduler] = Depends(get_scheduler_factory),
):
    try:
        scheduler = scheduler_factory(
            mentor={"id": "preview"},
            availability=req.availability,
            default_timezone=req.default_timezone,
            viewer_timezone=req.viewer_timezone,
            scheduling_window_days=req.scheduling_window_days,
            now=req.now,
            timezone=req.timezone,
            anchor=req.anchor_date,
        )
    except (ValueError, ZoneInfoNotFoundError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    days = scheduler.calendar_days()
    for _ in range(abs(req.week_offset)):
        days = scheduler.page_forward() if req.week_offset > 0 else scheduler.page_backward()

    return CalendarResponseSchema(
        anchor_date=scheduler.navigator.anchor,
        days=[
            CalendarDaySchema(
                date=day.date,
                key=day.key,
                label=format_day_label(day.date),
                has_slots=day.has_slots,
                slot_count=day.slot_count,
                selectable=day.selectable,
                slots=[
                    SlotSchema(
                        id=s.id,
                        start=s.start,
                        end=s.end,
                        label=s.label,
                        metadata=s.metadata,
                        timezone=s.timezone,
                        meeting_url=s.meeting_url,
                        format=s.format,
                        duration_minutes=s.duration_minutes,
                        capacity=s.capacity,
                    )
                    for s in scheduler.slots_for_day(day.key)
                ],
            )
            for day in days
        ],
        timezone_options=[
            TimezoneOptionSchema(value=option.value, label=option.label) for option in scheduler.timezone_options
        ],
    )


@router.post("/sessions", response_model=ScheduleResponseSchema, status_code=201)
def schedule_session(
    req: ScheduleRequestSchema,
    scheduler_factory: Callable[..., SessionScheduler] = Depends(get_scheduler_factory),
    sink: ScheduleSinkPort = Depends(get_schedule_sink),
):
    try:
        scheduler = scheduler_factory(
            mentor=req.mentor,
            availability=req.availability,
            session_types=req.session_types,
            timezone_options=[TimezoneOption(value=o.value, label=o.label) for o in req.timezone_options],
            default_timezone=req.default_timezone,
            viewer_timezone=req.viewer_timezone,
            scheduling_window_days=req.scheduling_window_days,
            now=req.now,
            timezone=req.timezone,
        )
    except (ValueError, ZoneInfoNotFoundError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    _replay_selection(scheduler, req.selection)

    request = scheduler.build_request()
    if request is None:
        raise HTTPException(status_code=422, detail={"reason": "incomplete_booking"})

    try:
        session_id = sink.submit(request)
    except (ScheduleUpstreamError, ScheduleContractError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    logger.info("Session request submitted", extra={"session_id": session_id, "mentor_id": request.mentor_id})
    scheduler.close()
    return ScheduleResponseSchema(session_id=session_id, request=booking_request_payload(request))
