# backend/ajanvaraus/config.py

import logging
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


class Settings(BaseSettings):
    slot_step_minutes: int = 15
    timezone: str = "Europe/Helsinki"
    duplicate_weekly_rules: Literal["reject", "last_wins"] = "reject"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_log_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        if isinstance(level, int):
            return level
        return logging.INFO


settings = Settings()
