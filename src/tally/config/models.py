"""Configuration models using Pydantic."""

import logging
from datetime import timedelta
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from tally.config.paths import expand_path, get_data_path, get_system_timezone
from tally.reports.durations import DEFAULT_FORMAT

logger = logging.getLogger(__name__)


def _default_timezone() -> str:
    name = get_system_timezone()
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("system_timezone_unknown", extra={"timezone": name})
        return "UTC"
    return name


class TimeGoal(BaseModel):
    """A target amount of work time."""

    hours: int = Field(default=0, ge=0)
    minutes: int = Field(default=0, ge=0, lt=60)

    @property
    def duration(self) -> timedelta:
        return timedelta(hours=self.hours, minutes=self.minutes)


class TimeGoalConfig(BaseModel):
    """Daily and weekly goals used by ``show --remaining``."""

    daily: TimeGoal = Field(default_factory=lambda: TimeGoal(hours=8))
    weekly: TimeGoal = Field(default_factory=lambda: TimeGoal(hours=40))


class DisplayConfig(BaseModel):
    """Defaults for rendering durations."""

    format: str = DEFAULT_FORMAT
    include_seconds: bool = False


class ConfigError(Exception):
    """Configuration error."""

    pass


class TallyConfig(BaseModel):
    """Root configuration model."""

    data_file: Path = Field(default_factory=get_data_path)
    timezone: str = Field(default_factory=_default_timezone)
    # Stop the running session automatically when starting a new one
    auto_insert_stop: bool = False
    time_goal: TimeGoalConfig = Field(default_factory=TimeGoalConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    @field_validator("data_file", mode="before")
    @classmethod
    def _expand_data_file(cls, value: str | Path) -> Path:
        return expand_path(value)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
