from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    LOCAL_TIMEZONE: str = "UTC"
    DEFAULT_TIMEZONE: str | None = None
    SCHEDULING_WINDOW_DAYS: int = Field(default=21, ge=0)
    HIDE_PAST_SLOTS: bool = False

    MENTORING_API_BASE_URL: str = "http://localhost:4000/api"
    MENTORING_API_TOKEN: str | None = None
    MENTORING_API_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
