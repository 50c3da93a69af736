from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from mentor_scheduling.application.utils.payload import first_present
from mentor_scheduling.domain.entities.service_catalog import (
    AgendaTemplate,
    SessionTypeOption,
    TimezoneOption,
)
from mentor_scheduling.domain.entities.slot import NormalizedSlot

DEFAULT_AGENDA_TEMPLATES = (
    AgendaTemplate(
        id="kickoff",
        title="Kickoff alignment",
        description="Clarify goals, context, and desired momentum for the next 90 days.",
        agenda=("Current role + mandate", "North-star outcomes", "Immediate blockers", "Follow-up rituals"),
    ),
    AgendaTemplate(
        id="growth_sprint",
        title="Growth sprint planning",
        description="Design a focused sprint across GTM, product, and ops levers.",
        agenda=(
            "Performance baseline review",
            "Key experiments",
            "Stakeholder alignment",
            "Measurement + check-ins",
        ),
    ),
    AgendaTemplate(
        id="promotion_clinic",
        title="Promotion clinic",
        description="Audit portfolio and narrative to accelerate promotion readiness.",
        agenda=("Wins & impact inventory", "Gap analysis", "Narrative rehearsal", "Action commitments"),
    ),
)


def _dedupe(items: Iterable[Any]) -> list[Any]:
    seen: set[str] = set()
    unique = []
    for item in items:
        if item is None or not item.id or item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def _session_type(raw: Any, index: int) -> SessionTypeOption | None:
    if not raw:
        return None
    if isinstance(raw, SessionTypeOption):
        return raw
    if isinstance(raw, str):
        return SessionTypeOption(id=f"session-{index}", label=raw)
    if isinstance(raw, Mapping):
        session_id = first_present(raw, "id", "slug", "key")
        duration = first_present(raw, "duration", "durationMinutes", "duration_minutes")
        price = raw.get("price")
        return SessionTypeOption(
            id=str(session_id) if session_id is not None else f"session-{index}",
            label=first_present(raw, "label", "title", "name") or "Mentor session",
            description=first_present(raw, "description", "summary"),
            duration=int(duration) if duration is not None else None,
            price=float(price) if price is not None else None,
        )
    return None


def normalize_session_types(raw_types: Iterable[Any] | None) -> list[SessionTypeOption]:
    """Coerce mentor-published offerings into SessionTypeOption, dropping blanks and repeated ids."""
    return _dedupe(_session_type(raw, index) for index, raw in enumerate(raw_types or ()))


def _agenda_template(raw: Any, index: int) -> AgendaTemplate | None:
    if not raw:
        return None
    if isinstance(raw, AgendaTemplate):
        return raw
    if isinstance(raw, str):
        return AgendaTemplate(id=f"template-{index}", title=raw, description=raw)
    if not isinstance(raw, Mapping):
        return None

    agenda = raw.get("agenda")
    if isinstance(agenda, (list, tuple)):
        lines = tuple(str(line) for line in agenda)
    elif isinstance(raw.get("body"), str):
        lines = tuple(line.strip() for line in raw["body"].split("\n") if line.strip())
    else:
        lines = ()

    template_id = first_present(raw, "id", "slug")
    return AgendaTemplate(
        id=str(template_id) if template_id is not None else f"template-{index}",
        title=first_present(raw, "title", "name") or "Mentor session",
        description=first_present(raw, "description", "summary") or "",
        agenda=lines,
    )


def normalize_agenda_templates(
    mentor_templates: Iterable[Any] | None = None,
    extra_templates: Iterable[Any] | None = None,
) -> list[AgendaTemplate]:
    """Mentor templates first, then caller templates, then the built-in defaults."""
    combined = [*(mentor_templates or ()), *(extra_templates or ()), *DEFAULT_AGENDA_TEMPLATES]
    return _dedupe(_agenda_template(raw, index) for index, raw in enumerate(combined))


def build_timezone_options(
    slots: Iterable[NormalizedSlot],
    default_timezone: str | None = None,
    viewer_timezone: str | None = None,
) -> list[TimezoneOption]:
    """
    Default zone first, then the viewer zone, then the zones the slots are published in.
    Ties are ordered alphabetically.
    """
    ranked: dict[str, tuple[int, TimezoneOption]] = {}
    if viewer_timezone:
        ranked[viewer_timezone] = (1, TimezoneOption(value=viewer_timezone, label=f"Your timezone ({viewer_timezone})"))
    if default_timezone and default_timezone not in ranked:
        ranked[default_timezone] = (0, TimezoneOption(value=default_timezone, label=default_timezone))
    for slot in slots:
        zone = slot.timezone
        if zone and zone not in ranked:
            ranked[zone] = (2, TimezoneOption(value=zone, label=zone))

    return [option for _, option in sorted(ranked.values(), key=lambda item: (item[0], item[1].value))]
