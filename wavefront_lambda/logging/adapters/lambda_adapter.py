"""Lambda adapter binding logging context to the current invocation."""

from collections.abc import Iterator
from contextlib import contextmanager

from wavefront_lambda.logging.context import clear_context, set_correlation_id, set_extra_context
from wavefront_lambda.types import LambdaContext


def set_lambda_context(context: LambdaContext) -> None:
    """Set logging context from the Lambda context object.

    Args:
        context: Lambda context object. Missing attributes are skipped.
    """
    request_id = getattr(context, "aws_request_id", None)
    if isinstance(request_id, str):
        set_correlation_id(request_id)

    fields = {
        name: value
        for name in ("function_name", "function_version")
        if isinstance(value := getattr(context, name, None), str)
    }
    if fields:
        set_extra_context(**fields)


@contextmanager
def lambda_logging_context(context: LambdaContext) -> Iterator[None]:
    """Bind the invocation's logging context for the duration of a block.

    Args:
        context: Lambda context object.
    """
    set_lambda_context(context)
    try:
        yield
    finally:
        clear_context()
