from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_TITLE: str = "Meeting Room Booking"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BOOKING_API_BASE_URL: str | None = None
    BOOKING_API_TIMEOUT_SECONDS: float = 10.0

    PROBE_DEBOUNCE_MS: int = 800
    BOOKINGS_PAGE_LIMIT: int = 10


settings = Settings()
