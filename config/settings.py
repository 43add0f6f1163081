from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Core
    ENVIRONMENT: str = Field(default="production")
    LOG_LEVEL: str = Field(default="INFO")

    # Storage
    DATA_DIR: str = Field(default="./data")
    UPLOAD_DIR: str = Field(default="./uploads")

    # Queries
    DEFAULT_WINDOW_DAYS: int = Field(default=30)

    # Ingest
    MAX_INGEST_WARNINGS: int = Field(default=200)
    TURNAROUND_DATE_MODE: str = Field(default="snapshot")  # snapshot | row
    TURNAROUND_DATE_COLUMN: str = Field(default="")  # required when mode=row
    TURNAROUND_TERMINAL_STATUS: str = Field(default="Sorted")


settings = Settings()
