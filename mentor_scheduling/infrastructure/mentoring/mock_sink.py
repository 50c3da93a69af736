from __future__ import annotations

import logging

from mentor_scheduling.application.ports.schedule_sink import ScheduleSinkPort
from mentor_scheduling.domain.entities.booking_request import BookingRequest


class MockScheduleSink(ScheduleSinkPort):
    def __init__(self) -> None:
        self._sessions: dict[str, BookingRequest] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def sessions(self) -> dict[str, BookingRequest]:
        return dict(self._sessions)

    def submit(self, request: BookingRequest) -> str:
        session_id = f"mock_session_{len(self._sessions) + 1}"
        self._sessions[session_id] = request
        self._logger.info(
            "Mock mentoring session scheduled",
            extra={
                "session_id": session_id,
                "mentor_id": request.mentor_id,
                "slot_id": request.slot.id,
                "start": request.slot.start.isoformat(),
            },
        )
        return session_id
