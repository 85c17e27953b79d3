"""Logging configuration using Pydantic settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wavefront_lambda.constants import SERVICE_NAME


class LogLevel(StrEnum):
    """Valid log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(StrEnum):
    """Valid log formats."""

    JSON = "json"
    HUMAN = "human"


class LoggingConfig(BaseSettings):
    """Logging configuration loaded from environment variables.

    Attributes:
        log_level: Minimum log level to output.
        log_format: json for CloudWatch, human for local runs.
        service_name: Service identifier attached to every JSON record.
        include_timestamp: Whether to include timestamp.
        include_location: Whether to include module/function/line info.
        quiet_loggers: Third-party loggers capped at WARNING.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: LogFormat = Field(default=LogFormat.JSON)
    service_name: str = Field(default=SERVICE_NAME)
    include_timestamp: bool = Field(default=True)
    include_location: bool = Field(default=False)
    quiet_loggers: tuple[str, ...] = Field(
        default=("wavefront_sdk", "urllib3", "requests"),
    )


@lru_cache
def get_logging_config() -> LoggingConfig:
    """Get cached logging configuration instance."""
    return LoggingConfig()
