"""Wavefront Lambda wrapper exception hierarchy.

Architecture:
    WavefrontLambdaError (base)
    ├── ConfigurationError (wrap/startup time, fatal)
    │   ├── InvalidHandlerError
    │   └── MissingSettingError
    ├── DecodingError (per invocation, recoverable)
    │   ├── PayloadDecodingError
    │   └── InvalidResourceIdentifierError
    └── ReportingError (logged, never surfaced)

Errors returned or raised by the wrapped handler are not part of this
hierarchy and are passed through unchanged.

Usage:
    from wavefront_lambda.exceptions import InvalidHandlerError

    if parameter_count > 2:
        raise InvalidHandlerError(
            "handlers may not take more than two arguments",
            handler_name=name,
        )
"""

from wavefront_lambda.exceptions.base import WavefrontLambdaError
from wavefront_lambda.exceptions.configuration_errors import (
    ConfigurationError,
    InvalidHandlerError,
    MissingSettingError,
)
from wavefront_lambda.exceptions.invocation_errors import (
    DecodingError,
    InvalidResourceIdentifierError,
    PayloadDecodingError,
    ReportingError,
)

__all__ = [
    "ConfigurationError",
    "DecodingError",
    "InvalidHandlerError",
    "InvalidResourceIdentifierError",
    "MissingSettingError",
    "PayloadDecodingError",
    "ReportingError",
    "WavefrontLambdaError",
]
