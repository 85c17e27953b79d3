"""Adapt a validated handler to the uniform ``(context, raw_payload)`` contract."""

import json
import logging
from collections.abc import Callable
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticUserError

from wavefront_lambda.exceptions.configuration_errors import (
    ConfigurationError,
    InvalidHandlerError,
)
from wavefront_lambda.exceptions.invocation_errors import PayloadDecodingError
from wavefront_lambda.handler.models import (
    CallShape,
    HandlerResult,
    HandlerSignature,
    ReturnShape,
)
from wavefront_lambda.handler.validation import validate_handler
from wavefront_lambda.types import LambdaContext, LambdaEvent

logger = logging.getLogger(__name__)

_CallStrategy = Callable[[Callable[..., Any], LambdaContext, Any], Any]

_CALL_STRATEGIES: dict[CallShape, _CallStrategy] = {
    CallShape.NO_ARGUMENTS: lambda handler, context, event: handler(),
    CallShape.EVENT: lambda handler, context, event: handler(event),
    CallShape.CONTEXT: lambda handler, context, event: handler(context),
    CallShape.CONTEXT_AND_EVENT: lambda handler, context, event: handler(context, event),
}


class Invoker(Protocol):
    """Normalized invocation contract shared by real and failing invokers."""

    def decode(self, raw_payload: bytes) -> Any:
        """Decode the payload into the handler's event argument."""
        ...

    def call(self, context: LambdaContext, event: Any) -> HandlerResult:
        """Call the handler with an already decoded event."""
        ...

    def __call__(self, context: LambdaContext, raw_payload: bytes) -> HandlerResult:
        """Decode and call in one step."""
        ...


def encode_payload(event: LambdaEvent) -> bytes:
    """Serialize a runtime event back to the raw JSON payload.

    Args:
        event: Event as delivered by the Lambda runtime, or raw bytes.

    Returns:
        JSON bytes.

    Raises:
        PayloadDecodingError: If the event is not JSON serializable.
    """
    if isinstance(event, bytes | bytearray):
        return bytes(event)
    try:
        return json.dumps(event).encode()
    except (TypeError, ValueError) as error:
        raise PayloadDecodingError(
            f"Event of type {type(event).__name__} is not JSON serializable: {error}",
        ) from error


def _error_slot(value: Any) -> BaseException | None:
    return value if isinstance(value, BaseException) else None


def _to_result(returned: Any, shape: ReturnShape) -> HandlerResult:
    if shape is ReturnShape.NOTHING:
        return HandlerResult()
    if shape is ReturnShape.UNDECLARED:
        # unannotated: an exception is the error, anything else the value
        if isinstance(returned, BaseException):
            return HandlerResult(error=returned)
        return HandlerResult(value=returned)
    if shape is ReturnShape.ERROR:
        return HandlerResult(error=_error_slot(returned))
    if isinstance(returned, tuple) and len(returned) == 2:
        value, error = returned
        return HandlerResult(value=value, error=_error_slot(error))
    return HandlerResult(value=returned)


def _type_name(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)


class NormalizedInvoker:
    """Invoke a validated handler through its resolved call strategy."""

    def __init__(self, handler: Callable[..., Any], signature: HandlerSignature) -> None:
        """Resolve the call strategy and build the payload decoder.

        Args:
            handler: The user handler.
            signature: Signature returned by ``validate_handler``.

        Raises:
            InvalidHandlerError: If the event annotation cannot be used for decoding.
        """
        self.signature = signature
        self._handler = handler
        self._call_strategy = _CALL_STRATEGIES[signature.call_shape]
        self._return_shape = signature.return_shape
        self._event_adapter: TypeAdapter[Any] | None = None
        if signature.expects_event:
            try:
                self._event_adapter = TypeAdapter(signature.event_type)
            except PydanticUserError as error:
                raise InvalidHandlerError(
                    f"handler event type {_type_name(signature.event_type)} "
                    f"cannot be decoded from JSON: {error}",
                ) from error

    def decode(self, raw_payload: bytes) -> Any:
        """Decode the payload into the handler's declared event type.

        Args:
            raw_payload: JSON payload bytes.

        Returns:
            The decoded event, or None when the handler takes no event.

        Raises:
            PayloadDecodingError: If the payload does not match the event type.
        """
        if self._event_adapter is None:
            return None
        try:
            return self._event_adapter.validate_json(raw_payload)
        except ValidationError as error:
            first_error = error.errors()[0]
            raise PayloadDecodingError(
                f"Payload does not match {_type_name(self.signature.event_type)}: "
                f"{first_error['msg']}",
                target_type=_type_name(self.signature.event_type),
                context={"error_count": error.error_count()},
            ) from error

    def call(self, context: LambdaContext, event: Any) -> HandlerResult:
        """Call the handler. Exceptions raised by the handler propagate unchanged."""
        returned = self._call_strategy(self._handler, context, event)
        return _to_result(returned, self._return_shape)

    def __call__(self, context: LambdaContext, raw_payload: bytes) -> HandlerResult:
        """Decode the payload and call the handler.

        A decoding failure is returned as the result error without calling
        the handler.
        """
        try:
            event = self.decode(raw_payload)
        except PayloadDecodingError as error:
            return HandlerResult(error=error)
        return self.call(context, event)


class FailingInvoker:
    """Stands in for a handler that failed validation.

    Every call returns the same configuration error, so the runtime always
    receives a callable and the failure surfaces at invocation time.
    """

    def __init__(self, error: ConfigurationError) -> None:
        """Initialize with the wrap-time error.

        Args:
            error: The error returned on every call.
        """
        self.error = error

    def decode(self, raw_payload: bytes) -> Any:
        """Ignore the payload."""
        return None

    def call(self, context: LambdaContext, event: Any) -> HandlerResult:
        """Return the configuration error."""
        return HandlerResult(error=self.error)

    def __call__(self, context: LambdaContext, raw_payload: bytes) -> HandlerResult:
        """Return the configuration error."""
        return HandlerResult(error=self.error)


def adapt_handler(handler: Any) -> NormalizedInvoker | FailingInvoker:
    """Validate and adapt a handler.

    Never raises for a bad handler shape; the returned invoker reports the
    problem on every call instead.

    Args:
        handler: The user handler.

    Returns:
        A NormalizedInvoker, or a FailingInvoker carrying the validation error.
    """
    try:
        return NormalizedInvoker(handler, validate_handler(handler))
    except ConfigurationError as error:
        logger.error(
            "Handler cannot be wrapped: %s",
            error.message,
            extra=error.to_log_dict(),
        )
        return FailingInvoker(error)
