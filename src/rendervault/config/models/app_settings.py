"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from rendervault.shared.constants import Logging


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging behavior including level, file output
    and console output settings.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file path")
    console_output: bool = Field(default=True, description="Enable console logging")
    use_rich: bool = Field(default=True, description="Use rich for console output")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"unknown logging level: {value}"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings"]
