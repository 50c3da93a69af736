from __future__ import annotations

from abc import ABC, abstractmethod

from mentor_scheduling.domain.entities.booking_request import BookingRequest


class ScheduleSinkPort(ABC):
    @abstractmethod
    def submit(self, request: BookingRequest) -> str:
        """Hand a finished booking request to the scheduling service. Returns session id."""
        raise NotImplementedError
