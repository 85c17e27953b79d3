"""Handler signature and invocation result models."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, NamedTuple


class CallShape(StrEnum):
    """How the handler is called."""

    NO_ARGUMENTS = "no_arguments"
    EVENT = "event"
    CONTEXT = "context"
    CONTEXT_AND_EVENT = "context_and_event"


class ReturnShape(StrEnum):
    """How the handler's return value maps onto (value, error)."""

    NOTHING = "nothing"
    UNDECLARED = "undeclared"
    ERROR = "error"
    VALUE_AND_ERROR = "value_and_error"


@dataclass(frozen=True)
class HandlerSignature:
    """Shape of a validated handler, derived once at wrap time.

    Attributes:
        argument_count: Number of positional parameters (0-2).
        first_argument_is_context: Whether the first parameter receives the
            Lambda context.
        return_count: Number of declared return values (0-2).
        last_return_is_error: Whether the last declared return is an exception.
        event_type: Annotation the payload is decoded into, ``Any`` if none.
        return_declared: Whether the handler has a return annotation at all.
    """

    argument_count: int
    first_argument_is_context: bool
    return_count: int
    last_return_is_error: bool
    event_type: Any = Any
    return_declared: bool = True

    @property
    def expects_event(self) -> bool:
        """Whether a decoded payload is passed to the handler."""
        return self.argument_count == 2 or (
            self.argument_count == 1 and not self.first_argument_is_context
        )

    @property
    def call_shape(self) -> CallShape:
        """Resolve the argument list variant."""
        if self.argument_count == 0:
            return CallShape.NO_ARGUMENTS
        if self.argument_count == 2:
            return CallShape.CONTEXT_AND_EVENT
        if self.first_argument_is_context:
            return CallShape.CONTEXT
        return CallShape.EVENT

    @property
    def return_shape(self) -> ReturnShape:
        """Resolve the return value variant."""
        if self.return_count == 0:
            return ReturnShape.NOTHING if self.return_declared else ReturnShape.UNDECLARED
        if self.return_count == 1:
            return ReturnShape.ERROR
        return ReturnShape.VALUE_AND_ERROR


class HandlerResult(NamedTuple):
    """Normalized outcome of one handler call."""

    value: Any = None
    error: BaseException | None = None
