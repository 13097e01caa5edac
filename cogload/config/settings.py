import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cogload import constants


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues.

    The engine itself is storage-agnostic; this URL is only used by the
    reference SQLAlchemy stores in cogload.stores.
    """
    db_url = os.getenv("COGLOAD_DATABASE_URL", "")
    if db_url:
        logger.info(f"Using COGLOAD_DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "cogload.db"
    db_url = f"sqlite:///{db_path.resolve()}"
    logger.info(f"Using default database path: {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="COGLOAD_DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="COGLOAD_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="COGLOAD_LOG_FILE")
    default_plan_id: str = Field(
        default="expert",
        validation_alias="COGLOAD_DEFAULT_PLAN",
        description="Training plan used when a user has none configured",
    )
    min_recovery_session_seconds: int = Field(
        default=constants.MIN_RECOVERY_SESSION_SECONDS,
        validation_alias="COGLOAD_MIN_RECOVERY_SESSION_SECONDS",
        ge=0,
    )
    override_penalty: int = Field(
        default=constants.OVERRIDE_PENALTY,
        validation_alias="COGLOAD_OVERRIDE_PENALTY",
        ge=0,
        description="Capacity points removed for the rest of the day per override",
    )
    max_daily_overrides: int = Field(
        default=constants.MAX_DAILY_OVERRIDES,
        validation_alias="COGLOAD_MAX_DAILY_OVERRIDES",
        ge=0,
    )
    max_weekly_overrides: int = Field(
        default=constants.MAX_WEEKLY_OVERRIDES,
        validation_alias="COGLOAD_MAX_WEEKLY_OVERRIDES",
        ge=0,
    )
    override_min_recovery_buffer: float = Field(
        default=constants.OVERRIDE_MIN_RECOVERY_BUFFER,
        validation_alias="COGLOAD_OVERRIDE_MIN_RECOVERY_BUFFER",
        ge=0,
        le=100,
    )
    meaningful_xp_ratio: float = Field(
        default=constants.MEANINGFUL_XP_RATIO,
        validation_alias="COGLOAD_MEANINGFUL_XP_RATIO",
        ge=0.0,
        le=1.0,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid COGLOAD_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
