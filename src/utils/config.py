import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from TEMPLATE_TALK_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TEMPLATE_TALK_",
        case_sensitive=False,
        extra="ignore",
    )

    db: str = Field("data/template_talk.db", description="SQLite file holding the template library")
    log_level: int = Field(logging.INFO)
    seed_defaults: bool = Field(True, description="Insert the default templates into an empty library")
    toast_ms: int = Field(3000, ge=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        if isinstance(v, int):
            return v
        level = logging.getLevelName(str(v).strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


def load_settings() -> Settings:
    return Settings()
