from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HORIZON_DAYS = 21


@dataclass(frozen=True)
class BookingWindowPolicy:
    horizon_days: int | None = DEFAULT_HORIZON_DAYS  # None or 0: no bounds

    def __post_init__(self) -> None:
        if self.horizon_days is not None and self.horizon_days < 0:
            raise ValueError(f"horizon_days must be >= 0, got {self.horizon_days}")

    @property
    def is_open_ended(self) -> bool:
        return not self.horizon_days
