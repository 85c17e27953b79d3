"""Assemble one metric batch per invocation and push it through a sender."""

import logging
import time
from collections.abc import Callable
from typing import Any

from wavefront_lambda.constants import (
    COLD_STARTS_METRIC,
    DURATION_METRIC,
    ERRORS_METRIC,
    INVOCATIONS_METRIC,
    MEMORY_PERCENTAGE_METRIC,
    MEMORY_TOTAL_METRIC,
    MEMORY_USED_METRIC,
    TAG_FUNCTION_NAME,
)
from wavefront_lambda.exceptions.invocation_errors import ReportingError
from wavefront_lambda.metrics.models import MemoryStats
from wavefront_lambda.metrics.registry import MetricsRegistry
from wavefront_lambda.point_tags import build_point_tags
from wavefront_lambda.reporting.sender import MetricSender, SenderFactory
from wavefront_lambda.types import LambdaContext

logger = logging.getLogger(__name__)

MemoryStatsProvider = Callable[[], MemoryStats]


class Reporter:
    """Send registry metrics with invocation point tags.

    A sender is opened per report and is always flushed and closed. Delivery
    is best effort: each failure is logged and the remaining points are still
    sent.
    """

    def __init__(
        self,
        registry: MetricsRegistry,
        sender_factory: SenderFactory,
        *,
        static_tags: dict[str, str] | None = None,
        report_standard_metrics: bool = True,
        memory_stats_provider: MemoryStatsProvider | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            registry: Metrics registry to read from.
            sender_factory: Opens a sender for one report.
            static_tags: Configured point tags added to every point.
            report_standard_metrics: Whether the four standard metrics are sent.
            memory_stats_provider: Source of memory gauges, None to skip them.
        """
        self._registry = registry
        self._sender_factory = sender_factory
        self._static_tags = dict(static_tags or {})
        self._report_standard_metrics = report_standard_metrics
        self._memory_stats_provider = memory_stats_provider

    def _collect_gauges(self) -> dict[str, float]:
        gauges: dict[str, float] = {}
        if self._report_standard_metrics:
            gauges[DURATION_METRIC] = self._registry.snapshot().last_duration_millis

        if self._memory_stats_provider is not None:
            try:
                memory = self._memory_stats_provider()
            except Exception:
                logger.warning("Memory statistics unavailable", exc_info=True)
            else:
                gauges[MEMORY_TOTAL_METRIC] = memory.total
                gauges[MEMORY_USED_METRIC] = memory.used
                gauges[MEMORY_PERCENTAGE_METRIC] = memory.used_percentage

        gauges.update(self._registry.custom_gauges())
        return gauges

    def _collect_counters(self) -> dict[str, float]:
        counters: dict[str, float] = {}
        if self._report_standard_metrics:
            deltas = self._registry.take_deltas()
            counters[COLD_STARTS_METRIC] = deltas.cold_starts
            counters[INVOCATIONS_METRIC] = deltas.invocations
            counters[ERRORS_METRIC] = deltas.errors

        for name, value in self._registry.drain_custom_counters().items():
            counters[name] = counters.get(name, 0.0) + value

        return {name: value for name, value in counters.items() if value}

    def _send(self, send: Callable[..., Any], metric_name: str, *args: Any) -> bool:
        try:
            send(metric_name, *args)
        except Exception as error:
            failure = ReportingError(str(error), metric_name=metric_name)
            logger.error("Failed to send %s: %s", metric_name, error, extra=failure.to_log_dict())
            return False
        return True

    def _release(self, sender: MetricSender) -> None:
        for step in ("flush_now", "close"):
            try:
                getattr(sender, step)()
            except Exception as error:
                failure = ReportingError(str(error), context={"step": step})
                logger.error("Sender %s failed: %s", step, error, extra=failure.to_log_dict())

    def report(self, context: LambdaContext) -> int:
        """Send gauges and delta counters for the current invocation.

        Args:
            context: Lambda context used for point tags and the source name.

        Returns:
            Number of points handed to the sender successfully.
        """
        tags = build_point_tags(context, self._static_tags)
        source = tags[TAG_FUNCTION_NAME]
        timestamp = int(time.time())

        gauges = self._collect_gauges()
        counters = self._collect_counters()

        sender = self._sender_factory()
        sent = 0
        try:
            for name, value in gauges.items():
                sent += self._send(sender.send_metric, name, value, timestamp, source, tags)
            for name, value in counters.items():
                sent += self._send(sender.send_delta_counter, name, value, source, tags)
        finally:
            self._release(sender)

        logger.debug(
            "Reported %d of %d points",
            sent,
            len(gauges) + len(counters),
        )
        return sent
