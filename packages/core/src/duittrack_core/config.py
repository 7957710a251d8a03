"""Configuration system for DuitTrack core.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the period engine and the
service layer around it.

Usage:
    from duittrack_core.config import DuitTrackSettings

    # Load from environment variables and .env file
    settings = DuitTrackSettings()

    # Reset configuration for profiles that never chose one
    config = settings.default_reset_config()

    # Today in the configured timezone
    today = settings.today()
"""

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.period import ResetConfig, ResetType


class PeriodSettings(BaseSettings):
    """Tracking-period settings.

    Environment Variables:
        DUITTRACK_PERIOD_DEFAULT_RESET_DAY: Reset day for profiles without one (1-31)
        DUITTRACK_PERIOD_DEFAULT_RESET_TYPE: fixed or last-day-of-month
        DUITTRACK_PERIOD_CURRENT_WINDOW: Periods generated to find the current one
        DUITTRACK_PERIOD_LOOKUP_WINDOW: Periods searched to map a date to a period
        DUITTRACK_PERIOD_ID_WINDOW: Periods searched to resolve a period id
        DUITTRACK_PERIOD_CACHE_ENABLED: Cache loaded period data per period id
    """

    model_config = SettingsConfigDict(
        env_prefix="DUITTRACK_PERIOD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_reset_day: int = Field(
        default=25,
        ge=1,
        le=31,
        description="Reset day used when a profile has none",
    )
    default_reset_type: ResetType = Field(
        default=ResetType.FIXED,
        description="Reset type used when a profile has none",
    )
    current_window: int = Field(
        default=3,
        ge=3,
        le=120,
        description="Number of periods generated to find the current period",
    )
    lookup_window: int = Field(
        default=24,
        ge=24,
        le=240,
        description="Number of periods searched when mapping a date to its period",
    )
    id_window: int = Field(
        default=12,
        ge=12,
        le=240,
        description="Number of periods searched when resolving a period id",
    )
    cache_enabled: bool = Field(
        default=True,
        description="Cache loaded period data per period id",
    )


class DuitTrackSettings(BaseSettings):
    """Root configuration for DuitTrack core.

    Environment Variables:
        DUITTRACK_ENV: Environment name (development, staging, production, test)
        DUITTRACK_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        DUITTRACK_TIMEZONE: IANA timezone that defines "today"

    Example:
        settings = DuitTrackSettings(
            timezone="Asia/Makassar",
            period=PeriodSettings(default_reset_day=1),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="DUITTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    timezone: str = Field(
        default="Asia/Jakarta",
        description="IANA timezone used to determine today's date",
    )

    period: PeriodSettings = Field(default_factory=PeriodSettings)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the timezone name is known to zoneinfo."""
        v = v.strip()
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"

    def default_reset_config(self) -> ResetConfig:
        """Reset configuration for profiles that never set one."""
        if self.period.default_reset_type == ResetType.LAST_DAY_OF_MONTH:
            return ResetConfig.last_day_of_month()
        return ResetConfig.fixed(self.period.default_reset_day)

    def today(self, now: Optional[datetime] = None) -> date:
        """Current date in the configured timezone."""
        zone = ZoneInfo(self.timezone)
        if now is None:
            return datetime.now(zone).date()
        if now.tzinfo is None:
            return now.date()
        return now.astimezone(zone).date()
