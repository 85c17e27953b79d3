"""Validate a user handler against the allowed call and return shapes.

Allowed handlers take up to two positional arguments; with two, the first
receives the Lambda context. Their return annotation declares up to two
values; the last declared value must be an exception type:

    def handler() -> None
    def handler(event: Order) -> None
    def handler(context: LambdaContext) -> Exception | None
    def handler(context: LambdaContext, event: Order) -> tuple[Receipt, Exception | None]

A handler without a return annotation has its return value passed through,
unless it returns an exception.
"""

import inspect
import types
from typing import Any, Union, get_args, get_origin

from wavefront_lambda.exceptions.configuration_errors import InvalidHandlerError
from wavefront_lambda.handler.models import HandlerSignature
from wavefront_lambda.types import LambdaContext

CONTEXT_PARAMETER_NAMES: frozenset[str] = frozenset({"context", "ctx", "lambda_context"})

_CONTEXT_ATTRIBUTES = ("invoked_function_arn", "aws_request_id")
_ERROR_SUFFIXES = ("Error", "Exception")
_TUPLE_PREFIXES = ("tuple[", "Tuple[", "typing.Tuple[")
_MAX_ARGUMENTS = 2
_MAX_RETURNS = 2


def _handler_name(handler: object) -> str:
    return getattr(handler, "__qualname__", None) or type(handler).__qualname__


def _annotation_namespace(handler: Any) -> dict[str, Any]:
    """Globals the handler's string annotations are evaluated against."""
    target = handler
    if not (inspect.isfunction(handler) or inspect.ismethod(handler)):
        target = getattr(type(handler), "__call__", handler)
    return getattr(inspect.unwrap(target), "__globals__", {})


def _resolve_annotation(annotation: Any, namespace: dict[str, Any]) -> Any:
    """Evaluate a string annotation, keeping the string if it cannot be resolved."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, namespace)  # noqa: S307
    except (NameError, SyntaxError, TypeError, AttributeError):
        return annotation


def _read_signature(handler: Any) -> inspect.Signature:
    """Read the signature, resolving each string annotation on its own.

    Names imported only under ``TYPE_CHECKING`` stay strings without
    preventing the other annotations from resolving.
    """
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError) as error:
        raise InvalidHandlerError(
            f"handler signature cannot be inspected: {error}",
            handler_name=_handler_name(handler),
        ) from error

    namespace = _annotation_namespace(handler)
    parameters = [
        parameter.replace(annotation=_resolve_annotation(parameter.annotation, namespace))
        for parameter in signature.parameters.values()
    ]
    return signature.replace(
        parameters=parameters,
        return_annotation=_resolve_annotation(signature.return_annotation, namespace),
    )


def _split_top_level(annotation: str, separator: str) -> list[str]:
    """Split an unresolved annotation on a separator outside brackets."""
    parts: list[str] = []
    depth = 0
    start = 0
    for index, character in enumerate(annotation):
        if character in "[(":
            depth += 1
        elif character in "])":
            depth -= 1
        elif character == separator and depth == 0:
            parts.append(annotation[start:index].strip())
            start = index + 1
    parts.append(annotation[start:].strip())
    return parts


def _is_context_annotation(annotation: Any) -> bool:
    if annotation is LambdaContext:
        return True
    if isinstance(annotation, str):
        return annotation.rsplit(".", 1)[-1].endswith("Context")
    if not isinstance(annotation, type):
        return False
    if annotation.__name__.endswith("Context"):
        return True
    declared = getattr(annotation, "__annotations__", {})
    return all(
        hasattr(annotation, attribute) or attribute in declared
        for attribute in _CONTEXT_ATTRIBUTES
    )


def is_context_parameter(parameter: inspect.Parameter) -> bool:
    """Check whether a parameter is meant to receive the Lambda context.

    Args:
        parameter: Parameter of the handler signature.

    Returns:
        True for context-typed parameters, or untyped ones named like a context.
    """
    if parameter.annotation in (inspect.Parameter.empty, Any):
        return parameter.name in CONTEXT_PARAMETER_NAMES
    return _is_context_annotation(parameter.annotation)


def is_error_annotation(annotation: Any) -> bool:
    """Check whether a return annotation can hold an exception.

    Args:
        annotation: A type, union of types, or unresolved string annotation.

    Returns:
        True for exception types and unions of exception types with None.
    """
    if isinstance(annotation, str):
        members = [member for member in _split_top_level(annotation, "|") if member != "None"]
        return bool(members) and all(member.endswith(_ERROR_SUFFIXES) for member in members)
    if isinstance(annotation, type):
        return issubclass(annotation, BaseException)
    if get_origin(annotation) in (Union, types.UnionType):
        members = [member for member in get_args(annotation) if member is not type(None)]
        return bool(members) and all(is_error_annotation(member) for member in members)
    return False


def _declared_string_returns(annotation: str, handler_name: str) -> tuple[Any, ...]:
    text = annotation.strip()
    prefix = next((prefix for prefix in _TUPLE_PREFIXES if text.startswith(prefix)), None)
    if prefix is None or not text.endswith("]"):
        return (annotation,)
    returns = tuple(_split_top_level(text[len(prefix) : -1], ","))
    if "..." in returns:
        raise InvalidHandlerError(
            "handler may not return a variable number of values",
            handler_name=handler_name,
        )
    return returns


def _declared_returns(annotation: Any, handler_name: str) -> tuple[Any, ...]:
    if annotation in (inspect.Signature.empty, None, type(None), "None"):
        return ()
    if isinstance(annotation, str):
        return _declared_string_returns(annotation, handler_name)
    if get_origin(annotation) is tuple:
        returns = get_args(annotation)
        if Ellipsis in returns:
            raise InvalidHandlerError(
                "handler may not return a variable number of values",
                handler_name=handler_name,
            )
        return returns
    return (annotation,)


def _validate_arguments(
    signature: inspect.Signature,
    handler_name: str,
) -> list[inspect.Parameter]:
    positional: list[inspect.Parameter] = []
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            raise InvalidHandlerError(
                f"handler arguments must be declared explicitly, got *{parameter.name}",
                handler_name=handler_name,
            )
        if parameter.kind is inspect.Parameter.KEYWORD_ONLY and parameter.default is parameter.empty:
            raise InvalidHandlerError(
                f"handler has a required keyword-only argument {parameter.name!r}",
                handler_name=handler_name,
            )
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional.append(parameter)

    if len(positional) > _MAX_ARGUMENTS:
        raise InvalidHandlerError(
            f"handlers may not take more than two arguments, but handler takes {len(positional)}",
            handler_name=handler_name,
        )
    if len(positional) == _MAX_ARGUMENTS and not is_context_parameter(positional[0]):
        raise InvalidHandlerError(
            "handler takes two arguments, but the first is not a Lambda context, "
            f"got {positional[0].name!r}",
            handler_name=handler_name,
        )
    return positional


def _validate_returns(returns: tuple[Any, ...], handler_name: str) -> None:
    if len(returns) > _MAX_RETURNS:
        raise InvalidHandlerError(
            "handler may not return more than two values",
            handler_name=handler_name,
        )
    if len(returns) == _MAX_RETURNS and not is_error_annotation(returns[1]):
        raise InvalidHandlerError(
            "handler returns two values, but the second is not an exception type",
            handler_name=handler_name,
        )
    if len(returns) == 1 and not is_error_annotation(returns[0]):
        raise InvalidHandlerError(
            "handler returns a single value, but it is not an exception type",
            handler_name=handler_name,
        )


def validate_handler(handler: Any) -> HandlerSignature:
    """Validate a handler and derive its signature.

    Args:
        handler: The user handler.

    Returns:
        The handler's signature.

    Raises:
        InvalidHandlerError: If the handler is not callable or its shape is not allowed.
    """
    if handler is None:
        raise InvalidHandlerError("handler is None")
    handler_name = _handler_name(handler)
    if not callable(handler):
        raise InvalidHandlerError(
            f"handler of type {type(handler).__name__} is not a function",
            handler_name=handler_name,
        )
    if inspect.iscoroutinefunction(handler):
        raise InvalidHandlerError(
            "coroutine handlers are not supported by the Lambda Python runtime",
            handler_name=handler_name,
        )

    signature = _read_signature(handler)
    positional = _validate_arguments(signature, handler_name)
    returns = _declared_returns(signature.return_annotation, handler_name)
    _validate_returns(returns, handler_name)

    first_is_context = bool(positional) and is_context_parameter(positional[0])
    event_type: Any = Any
    if positional and not (len(positional) == 1 and first_is_context):
        annotation = positional[-1].annotation
        if annotation is not inspect.Parameter.empty and not isinstance(annotation, str):
            event_type = annotation

    return HandlerSignature(
        argument_count=len(positional),
        first_argument_is_context=first_is_context,
        return_count=len(returns),
        last_return_is_error=bool(returns) and is_error_annotation(returns[-1]),
        event_type=event_type,
        return_declared=signature.return_annotation is not inspect.Signature.empty,
    )
