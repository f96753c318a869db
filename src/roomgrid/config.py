"""Process-level configuration.

This module defines ``RoomGridSettings`` using ``pydantic-settings`` to load
configuration from ``ROOMGRID_*`` environment variables. Engine behaviour
itself is configured through the policy objects passed to the builders;
these settings only provide the defaults the command-line tool uses.
"""

from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from roomgrid.domain.models import (
    FALLBACK_CLOSING_HOUR,
    FALLBACK_OPENING_HOUR,
    WINDOW_DAYS,
)
from roomgrid.domain.policies import DefaultOperatingHoursPolicy


class RoomGridSettings(BaseSettings):
    """Configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="ROOMGRID_", extra="ignore")

    fallback_opening_hour: int = Field(
        default=FALLBACK_OPENING_HOUR,
        ge=0,
        le=23,
        description="Opening hour used when neither room nor global settings define one.",
    )
    fallback_closing_hour: int = Field(
        default=FALLBACK_CLOSING_HOUR,
        ge=0,
        le=23,
        description="Closing hour used when neither room nor global settings define one.",
    )
    window_days: int = Field(
        default=WINDOW_DAYS,
        ge=1,
        description="Number of days shown by the calendar.",
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone the grid is rendered in.",
    )
    log_level: str = Field(default="INFO", description="Logging level name.")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _opening_before_closing(self) -> "RoomGridSettings":
        if self.fallback_opening_hour >= self.fallback_closing_hour:
            raise ValueError("fallback_opening_hour must be before fallback_closing_hour")
        return self

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    def hours_policy(self) -> DefaultOperatingHoursPolicy:
        """Operating-hours policy using the configured fallback."""
        return DefaultOperatingHoursPolicy(
            fallback_opening_hour=self.fallback_opening_hour,
            fallback_closing_hour=self.fallback_closing_hour,
        )


def get_settings() -> RoomGridSettings:
    """Load settings from the current environment."""
    return RoomGridSettings()
