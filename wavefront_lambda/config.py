"""Agent configuration using Pydantic BaseSettings.

Every setting may come from the environment or from code. A non-empty
environment variable always wins over a value passed in code, which in turn
wins over the built-in default.

Usage:
    from wavefront_lambda.config import load_agent_configuration

    configuration = load_agent_configuration(point_tags={"team": "payments"})
    print(configuration.enabled)
    print(configuration.batch_size)
"""

from typing import Any, Self

from pydantic import AliasChoices, Field, ValidationError, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from wavefront_lambda.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_ENABLED,
    DEFAULT_FLUSH_INTERVAL_SECONDS,
    DEFAULT_MAX_BUFFER_SIZE,
)
from wavefront_lambda.exceptions.configuration_errors import (
    ConfigurationError,
    MissingSettingError,
)


class AgentConfiguration(BaseSettings):
    """Wavefront direct-ingestion settings.

    Attributes:
        enabled: Whether the wrapper records and reports anything at all.
        url: Wavefront instance URL, e.g. https://example.wavefront.com.
        api_token: API token with direct data ingestion permission.
        batch_size: Max points sent per flush.
        max_buffer_size: Max buffered points before new points are dropped.
        flush_interval_seconds: Background flush interval of the sender.
        point_tags: Static tags attached to every reported point.
        report_standard_metrics: Whether the four built-in metrics are sent.
    """

    model_config = SettingsConfigDict(
        env_prefix="WAVEFRONT_",
        env_file=None,
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
        str_strip_whitespace=True,
        frozen=True,
    )

    enabled: bool = Field(default=DEFAULT_ENABLED)
    url: str | None = Field(default=None)
    api_token: str | None = Field(default=None, repr=False)
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    max_buffer_size: int = Field(default=DEFAULT_MAX_BUFFER_SIZE, ge=1)
    flush_interval_seconds: int = Field(default=DEFAULT_FLUSH_INTERVAL_SECONDS, ge=1)
    point_tags: dict[str, str] = Field(default_factory=dict)
    report_standard_metrics: bool = Field(
        default=True,
        validation_alias=AliasChoices("report_standard_metrics", "REPORT_STANDARD_METRICS"),
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read the environment before values passed in code."""
        return env_settings, init_settings

    @model_validator(mode="after")
    def validate_endpoint(self) -> Self:
        """Require an endpoint and credential while reporting is enabled."""
        if not self.enabled:
            return self
        if not self.url:
            error_message = "WAVEFRONT_URL is not set"
            raise ValueError(error_message)
        if not self.api_token:
            error_message = "WAVEFRONT_API_TOKEN is not set"
            raise ValueError(error_message)
        return self


_REQUIRED_SETTINGS = ("WAVEFRONT_URL", "WAVEFRONT_API_TOKEN")


def load_agent_configuration(**overrides: Any) -> AgentConfiguration:
    """Build the agent configuration from the environment and code overrides.

    Args:
        **overrides: Field values supplied in code. ``None`` means "not supplied".

    Returns:
        Validated, immutable AgentConfiguration.

    Raises:
        MissingSettingError: If enabled without a URL or API token.
        ConfigurationError: If any value cannot be parsed.
    """
    supplied = {name: value for name, value in overrides.items() if value is not None}
    try:
        return AgentConfiguration(**supplied)
    except ValidationError as error:
        message = "; ".join(str(detail["msg"]) for detail in error.errors())
        for setting_name in _REQUIRED_SETTINGS:
            if setting_name in message:
                raise MissingSettingError(
                    f"Invalid Wavefront configuration: {message}",
                    setting_name=setting_name,
                ) from error
        raise ConfigurationError(f"Invalid Wavefront configuration: {message}") from error
