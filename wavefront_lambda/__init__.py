"""Wavefront instrumentation for AWS Lambda Python handlers.

Reports cold starts, invocations, errors, duration and memory usage of each
invocation to Wavefront, tagged with the function's ARN-derived identity.

Usage:
    import wavefront_lambda

    @wavefront_lambda.wrapper
    def handler(context, event: dict) -> tuple[dict, Exception | None]:
        return {"status": "ok"}, None
"""

from wavefront_lambda.agent import WavefrontAgent, wrapper
from wavefront_lambda.config import AgentConfiguration, load_agent_configuration
from wavefront_lambda.handler.adapter import adapt_handler
from wavefront_lambda.handler.models import HandlerResult, HandlerSignature
from wavefront_lambda.handler.validation import validate_handler
from wavefront_lambda.metrics.registry import MetricsRegistry
from wavefront_lambda.point_tags import derive_point_tags

__all__ = [
    "AgentConfiguration",
    "HandlerResult",
    "HandlerSignature",
    "MetricsRegistry",
    "WavefrontAgent",
    "adapt_handler",
    "derive_point_tags",
    "load_agent_configuration",
    "validate_handler",
    "wrapper",
]
