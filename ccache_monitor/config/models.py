"""Pydantic configuration models for the ccache collector."""

from pydantic import BaseModel, Field, field_validator
import logging
import re


_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)(ms|s|m|h)')
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str) -> float:
    """
    Parse a duration string such as "2s", "500ms" or "1m30s" into seconds.

    A bare number is taken as seconds.

    Raises:
        ValueError: If the string is not a valid duration
    """
    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass

    parts = _DURATION_PART.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise ValueError(f"Invalid duration: {value!r}")
    return sum(float(number) * _DURATION_UNITS[unit] for number, unit in parts)


class CcacheConfig(BaseModel):
    """Configuration for the ccache statistics command."""
    binary: str = "ccache"
    timeout: float = Field(default=2.0, gt=0)  # Seconds

    @field_validator('timeout', mode='before')
    @classmethod
    def parse_timeout(cls, v):
        """Accept duration strings ("2s", "500ms") as well as numbers."""
        if isinstance(v, str):
            return parse_duration(v)
        return v

    @field_validator('binary')
    @classmethod
    def validate_binary(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('binary must not be empty')
        return v


class ScheduleConfig(BaseModel):
    """Collection cadence."""
    update_every: int = Field(default=1, ge=1)  # Seconds between cycles


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        # Unset ${LOG_LEVEL} substitutes to ""
        if not v:
            return "INFO"
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level


class CollectorSystemConfig(BaseModel):
    """Root configuration model for the collector."""
    ccache: CcacheConfig = Field(default_factory=CcacheConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
