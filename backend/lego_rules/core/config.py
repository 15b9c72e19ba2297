import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Evaluation
    ALLOW_UNDEFINED_FACTS: bool = False
    DEFAULT_PRIORITY: int = 1
    DEFAULT_EVENT_TYPE: str = "unknown"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("DEFAULT_PRIORITY")
    @classmethod
    def check_default_priority(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("DEFAULT_PRIORITY must be greater than zero")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).upper()


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the package logger hierarchy."""
    logging.getLogger("lego_rules").setLevel(level or settings.LOG_LEVEL)
