"""Logging configuration models."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator

from appiman.config.base import BaseConfig

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseConfig):
    """Log sink settings applied by the CLI."""

    level: LogLevel = Field("INFO", description="Minimum level for the stderr sink")
    file: Path | None = Field(None, description="Optional rotating log file")
    serialize: bool = Field(False, description="Write the log file as JSON records")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


__all__ = ["LoggingConfig", "LogLevel"]
