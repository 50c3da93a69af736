import logging

from fastapi import FastAPI

from mentor_scheduling.api.v1.scheduling import router as scheduling_router
from mentor_scheduling.core.config import settings
from mentor_scheduling.core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)
logging.getLogger(__name__).info(
    "Scheduler starting ENV=%s timezone=%s window_days=%s",
    settings.ENV,
    settings.LOCAL_TIMEZONE,
    settings.SCHEDULING_WINDOW_DAYS,
)

app = FastAPI(title="Mentor Session Scheduler", version="1.0.0")

app.include_router(scheduling_router, prefix="/api/v1/scheduling", tags=["scheduling"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
