"""Router configuration loaded from environment variables."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class RouterEnv(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with ROUTER_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    env: RouterEnv = RouterEnv.DEV
    debug: bool = False

    # Parameter key holding the SQL script when none is named explicitly
    sql_param_key: str = "sql"

    # Tables registered without a name get this prefix and are hidden from SHOW TABLES
    unnamed_table_prefix: str = "UnnamedTable"

    # Statement classifier backend and the tokenizer dialect it splits with
    classifier_implementation: str = "sqlglot"
    classifier_dialect: str = "spark"

    # Local execution (":memory:" keeps everything in-process)
    local_db_path: str = ":memory:"

    # Logging
    structured_logging: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("sql_param_key")
    @classmethod
    def sql_param_key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("sql_param_key must not be blank")
        return v.strip()

    @field_validator("classifier_implementation", "classifier_dialect")
    @classmethod
    def classifier_name_normalised(cls, v: str) -> str:
        name = v.strip().lower()
        if not name:
            raise ValueError("classifier names must not be blank")
        return name


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded settings for environment: %s", settings.env.value)

    return settings
