"""Configuration errors, discovered once at wrap or startup time."""

from typing import Any, ClassVar

from wavefront_lambda.exceptions.base import WavefrontLambdaError


class ConfigurationError(WavefrontLambdaError):
    """Base class for errors that make the wrapper unusable as configured."""

    error_code: ClassVar[str] = "CONFIGURATION_ERROR"


class InvalidHandlerError(ConfigurationError):
    """The wrapped handler does not have an allowed shape.

    Raised at wrap time; the adapted invoker returns it on every call.
    """

    error_code: ClassVar[str] = "INVALID_HANDLER"

    def __init__(
        self,
        message: str,
        *,
        handler_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid handler error.

        Args:
            message: Description of the shape violation.
            handler_name: Qualified name of the offending handler.
            context: Additional context information.
        """
        context_dict = context or {}
        if handler_name is not None:
            context_dict["handler_name"] = handler_name
        super().__init__(message, context=context_dict)


class MissingSettingError(ConfigurationError):
    """A setting required while reporting is enabled is not set."""

    error_code: ClassVar[str] = "MISSING_SETTING"

    def __init__(
        self,
        message: str,
        *,
        setting_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize missing setting error.

        Args:
            message: Description of what is missing.
            setting_name: Environment variable name of the setting.
            context: Additional context information.
        """
        context_dict = context or {}
        if setting_name is not None:
            context_dict["setting_name"] = setting_name
        super().__init__(message, context=context_dict)
