"""Structured logging for Lambda functions wrapped with wavefront_lambda.

Usage:
    from wavefront_lambda.logging import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Processing order", extra={"order_id": "123"})
"""

from wavefront_lambda.logging.config import LoggingConfig
from wavefront_lambda.logging.context import (
    clear_context,
    correlation_id,
    get_correlation_id,
    get_extra_context,
    set_correlation_id,
    set_extra_context,
)
from wavefront_lambda.logging.formatters import HumanFormatter, JSONFormatter
from wavefront_lambda.logging.logger import get_logger, reset_logging, setup_logging

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "LoggingConfig",
    "clear_context",
    "correlation_id",
    "get_correlation_id",
    "get_extra_context",
    "get_logger",
    "reset_logging",
    "set_correlation_id",
    "set_extra_context",
    "setup_logging",
]
