#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Configuration
Settings loaded from environment variables (prefix HABITCHECK_) and .env

Version: 1.0.0
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from habitcheck import __version__
from habitcheck.utils.logger import setup_logger


class HabitCheckSettings(BaseSettings):
    """HabitCheck settings"""

    model_config = SettingsConfigDict(
        env_prefix="HABITCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ===== GENERAL =====

    APP_NAME: str = Field(default="HabitCheck", description="Application name")
    VERSION: str = Field(default=__version__, description="Application version")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment (development/production/testing)"
    )
    DEBUG: bool = Field(default=False, description="Debug mode, enables API docs")

    # ===== NETWORK =====

    HOST: str = Field(default="127.0.0.1", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    ALLOWED_ORIGINS: List[str] = Field(default=["*"], description="CORS origins")

    # ===== STORAGE =====

    DATA_DIR: Path = Field(default=Path("data"), description="Data directory")
    DATABASE_FILE: str = Field(default="habits.json", description="Habit database file name")
    BACKUP_DIR: Path = Field(default=Path("backups"), description="Backup directory")
    MAX_BACKUPS: int = Field(default=10, ge=1, description="Backups kept before rotation")

    # ===== LOGGING =====

    LOG_LEVEL: str = Field(default="INFO", description="DEBUG/INFO/WARNING/ERROR/CRITICAL")
    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format"
    )
    LOG_DATE_FORMAT: str = Field(default="%Y-%m-%d %H:%M:%S", description="Log date format")
    LOG_FILE: Optional[Path] = Field(default=None, description="Rotating log file, disabled when empty")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def database_path(self) -> Path:
        return self.DATA_DIR / self.DATABASE_FILE

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def setup_logging(self) -> None:
        """Configure root logging once per process"""
        root = logging.getLogger()
        root.setLevel(getattr(logging, self.LOG_LEVEL))

        formatter = logging.Formatter(self.LOG_FORMAT, datefmt=self.LOG_DATE_FORMAT)
        if not any(type(h) is logging.StreamHandler for h in root.handlers):
            stream = logging.StreamHandler()
            stream.setFormatter(formatter)
            root.addHandler(stream)

        if self.LOG_FILE:
            setup_logger(str(self.LOG_FILE), formatter=formatter)


@lru_cache()
def get_settings() -> HabitCheckSettings:
    return HabitCheckSettings()
