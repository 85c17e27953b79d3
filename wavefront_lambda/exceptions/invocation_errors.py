"""Per-invocation errors raised by the wrapper."""

from typing import Any, ClassVar

from wavefront_lambda.exceptions.base import WavefrontLambdaError


class DecodingError(WavefrontLambdaError):
    """Input could not be decoded into the expected shape."""

    error_code: ClassVar[str] = "DECODING_ERROR"


class PayloadDecodingError(DecodingError):
    """The invocation payload does not match the handler's event type.

    Returned to the runtime as the invocation error; the handler is not called.
    """

    error_code: ClassVar[str] = "PAYLOAD_DECODING_ERROR"

    def __init__(
        self,
        message: str,
        *,
        target_type: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize payload decoding error.

        Args:
            message: Description of the decoding failure.
            target_type: Name of the type the payload was decoded into.
            context: Additional context information.
        """
        context_dict = context or {}
        if target_type is not None:
            context_dict["target_type"] = target_type
        super().__init__(message, context=context_dict)


class InvalidResourceIdentifierError(DecodingError):
    """A resource identifier (ARN) is too short to derive point tags from."""

    error_code: ClassVar[str] = "INVALID_RESOURCE_IDENTIFIER"

    def __init__(
        self,
        message: str,
        *,
        resource_identifier: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid resource identifier error.

        Args:
            message: Description of the problem.
            resource_identifier: The identifier that failed to parse.
            context: Additional context information.
        """
        context_dict = context or {}
        if resource_identifier is not None:
            context_dict["resource_identifier"] = resource_identifier
        super().__init__(message, context=context_dict)


class ReportingError(WavefrontLambdaError):
    """Metrics could not be delivered. Logged, never surfaced to the runtime."""

    error_code: ClassVar[str] = "REPORTING_ERROR"

    def __init__(
        self,
        message: str,
        *,
        metric_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize reporting error.

        Args:
            message: Description of the delivery failure.
            metric_name: Name of the metric being sent, if any.
            context: Additional context information.
        """
        context_dict = context or {}
        if metric_name is not None:
            context_dict["metric_name"] = metric_name
        super().__init__(message, context=context_dict)
