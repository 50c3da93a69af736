from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionTypeOption:
    id: str
    label: str
    description: str | None = None
    duration: int | None = None  # minutes
    price: float | None = None


@dataclass(frozen=True)
class AgendaTemplate:
    id: str
    title: str
    description: str = ""
    agenda: tuple[str, ...] = ()

    def notes_text(self) -> str:
        if self.agenda:
            return "\n".join(self.agenda)
        return self.description


@dataclass(frozen=True)
class TimezoneOption:
    value: str  # IANA identifier
    label: str
