from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_NAME: str = "4everevents"
    BUSINESS_EMAIL: str | None = None
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"

    WORKING_HOURS_START: int = 9
    WORKING_HOURS_END: int = 18
    WORKING_HOURS_END_INCLUSIVE: bool = True
    DEFAULT_DURATION_MINUTES: int = 120

    DATABASE_URL: str = "sqlite:///./bookings.db"

    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_REFRESH_TOKEN: str | None = None
    GOOGLE_CALENDAR_ID: str = "primary"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"
    GMAIL_BASE_URL: str = "https://gmail.googleapis.com/gmail/v1"
    GMAIL_USER: str | None = None

    CALENDAR_TIMEOUT_SECONDS: float = 10.0
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    AUDIT_QUEUE_SIZE: int = 1000

    @property
    def google_configured(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET and self.GOOGLE_REFRESH_TOKEN)


settings = Settings()
