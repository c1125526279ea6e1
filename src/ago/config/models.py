"""Configuration models describing ago settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AgoBaseModel(BaseModel):
    """Shared configuration for ago Pydantic settings models."""

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(AgoBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level for the ``ago`` loggers.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class AnalysisSettings(AgoBaseModel):
    """Word analysis options.

    Attributes:
        echo_content: Whether the placeholder analyzer prints added content.
    """

    echo_content: bool = True


class AgoConfig(AgoBaseModel):
    """Top-level configuration for ago.

    Attributes:
        logging: Logging configuration.
        analysis: Word analysis configuration.
    """

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)


__all__ = ["AgoBaseModel", "LoggingSettings", "AnalysisSettings", "AgoConfig"]
