from __future__ import annotations

import logging

import httpx

from mentor_scheduling.application.exceptions import ScheduleContractError, ScheduleUpstreamError
from mentor_scheduling.application.ports.schedule_sink import ScheduleSinkPort
from mentor_scheduling.application.use_cases.booking_request import booking_request_payload
from mentor_scheduling.core.config import settings
from mentor_scheduling.domain.entities.booking_request import BookingRequest


class MentoringApiSink(ScheduleSinkPort):
    def __init__(
        self,
        api_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_token = api_token or settings.MENTORING_API_TOKEN
        self._base_url = (base_url or settings.MENTORING_API_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=timeout or settings.MENTORING_API_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._api_token:
            raise ValueError("MENTORING_API_TOKEN is required for the mentoring API sink")

    def submit(self, request: BookingRequest) -> str:
        url = f"{self._base_url}/mentoring/sessions"
        headers = {"Authorization": f"Bearer {self._api_token}", "Content-Type": "application/json"}
        try:
            response = self._client.post(url, json=booking_request_payload(request), headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error(
                "Error submitting mentoring session",
                extra={"error": str(e), "mentor_id": request.mentor_id, "slot_id": request.slot.id},
            )
            raise ScheduleUpstreamError(f"Mentoring API request failed: {e}") from e

        session = data.get("session", data) if isinstance(data, dict) else {}
        if not isinstance(session, dict):
            session = {}
        session_id = session.get("id") or session.get("sessionId")
        if not session_id:
            raise ScheduleContractError("No session id returned from mentoring API")

        self._logger.info(
            "Mentoring session scheduled",
            extra={"session_id": str(session_id), "mentor_id": request.mentor_id, "slot_id": request.slot.id},
        )
        return str(session_id)
