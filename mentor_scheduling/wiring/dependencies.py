from functools import lru_cache, partial
from collections.abc import Callable
import logging

from mentor_scheduling.core.config import settings
from mentor_scheduling.application.ports.schedule_sink import ScheduleSinkPort
from mentor_scheduling.application.use_cases.session_scheduler import SessionScheduler
from mentor_scheduling.infrastructure.mentoring.mentoring_api_sink import MentoringApiSink
from mentor_scheduling.infrastructure.mentoring.mock_sink import MockScheduleSink


@lru_cache
def get_schedule_sink() -> ScheduleSinkPort:
    logger = logging.getLogger(__name__)
    logger.info("ENV=%s", settings.ENV)

    if not settings.MENTORING_API_TOKEN or settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockScheduleSink (token missing or ENV=dev/local)")
        return MockScheduleSink()

    logger.info("Using MentoringApiSink base_url=%s", settings.MENTORING_API_BASE_URL)
    return MentoringApiSink()


def get_scheduler_factory() -> Callable[..., SessionScheduler]:
    """Build one SessionScheduler per booking attempt with settings-backed defaults."""
    return partial(
        SessionScheduler,
        timezone=settings.LOCAL_TIMEZONE,
        default_timezone=settings.DEFAULT_TIMEZONE,
        scheduling_window_days=settings.SCHEDULING_WINDOW_DAYS,
        hide_past_slots=settings.HIDE_PAST_SLOTS,
    )
