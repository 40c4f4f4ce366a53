from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Logging
    log_level: str = "INFO"

    # CORS settings
    allowed_origins: list[str] = ["*"]

    # SMTP transport (defaults match the Proton Mail submission server)
    smtp_host: str = "smtp.protonmail.ch"
    smtp_port: int = 587
    smtp_security: str = "starttls"  # starttls | ssl | none
    smtp_timeout: float = 30.0
    email_user: Optional[str] = None
    email_pass: Optional[str] = None
    email_from: Optional[str] = None

    # Per-form recipients and calendar strategy
    rsvp_operator_address: str = "edgecases@promontoryai.com"
    rsvp_calendar_mode: str = "attachment"  # attachment | link | none
    contact_operator_address: str = "hello@promontoryai.com"

    # Submission rate limiting (per client address)
    rate_limit_max_requests: int = 5
    rate_limit_window_seconds: int = 900
    rate_limit_purge_minutes: int = 5


@lru_cache
def get_settings():
    return Settings()
