"""Public entry point: wrap a Lambda handler and report to Wavefront.

Usage:
    from wavefront_lambda import WavefrontAgent
    from wavefront_lambda.types import LambdaContext

    agent = WavefrontAgent(point_tags={"team": "payments"})

    @agent.wrap_handler
    def handler(context: LambdaContext, event: Order) -> tuple[dict, Exception | None]:
        agent.register_counter("orders.received", 1)
        return {"status": "ok"}, None

The module is imported by the Lambda runtime once per execution
environment, so the agent and its registry live for the whole process.
"""

import logging
from functools import partial, update_wrapper
from typing import Any

from wavefront_lambda.config import AgentConfiguration, load_agent_configuration
from wavefront_lambda.handler.adapter import adapt_handler
from wavefront_lambda.invocation.orchestrator import InvocationOrchestrator
from wavefront_lambda.metrics.memory import get_memory_stats
from wavefront_lambda.metrics.registry import MetricsRegistry
from wavefront_lambda.reporting.reporter import MemoryStatsProvider, Reporter
from wavefront_lambda.reporting.sender import SenderFactory, create_direct_sender
from wavefront_lambda.types import LambdaContext, LambdaEntryPoint, LambdaEvent

logger = logging.getLogger(__name__)


class WavefrontAgent:
    """Owns the configuration, metrics registry and reporter of one process."""

    def __init__(
        self,
        configuration: AgentConfiguration | None = None,
        *,
        registry: MetricsRegistry | None = None,
        sender_factory: SenderFactory | None = None,
        memory_stats_provider: MemoryStatsProvider | None = get_memory_stats,
        **overrides: Any,
    ) -> None:
        """Initialize the agent.

        Args:
            configuration: Ready configuration. Loaded from the environment and
                ``overrides`` when not provided.
            registry: Metrics registry, a new one by default.
            sender_factory: Opens a sender per report. Defaults to a Wavefront
                direct-ingestion client.
            memory_stats_provider: Source of memory gauges, None to disable them.
            **overrides: AgentConfiguration fields supplied in code.

        Raises:
            ConfigurationError: If reporting is enabled without URL or API token,
                or a setting cannot be parsed.
        """
        if configuration is None:
            configuration = load_agent_configuration(**overrides)
        self.configuration = configuration
        self.registry = registry or MetricsRegistry()
        self._reporter: Reporter | None = None
        if self.configuration.enabled:
            self._reporter = Reporter(
                self.registry,
                sender_factory or partial(create_direct_sender, self.configuration),
                static_tags=self.configuration.point_tags,
                report_standard_metrics=self.configuration.report_standard_metrics,
                memory_stats_provider=memory_stats_provider,
            )
        else:
            logger.info("Wavefront reporting is disabled")

    @property
    def enabled(self) -> bool:
        """Whether invocations are instrumented."""
        return self._reporter is not None

    def wrap_handler(self, handler: Any) -> LambdaEntryPoint:
        """Wrap a handler into the ``(event, context)`` entry point the runtime calls.

        The handler is validated once here. An invalid handler does not raise;
        every invocation then fails with the validation error.

        Args:
            handler: User handler, see ``wavefront_lambda.handler.validation``.

        Returns:
            Entry point returning the handler's value. A returned error is raised.
        """
        orchestrator = InvocationOrchestrator(adapt_handler(handler), self.registry, self._reporter)

        def handle_invocation(event: LambdaEvent, context: LambdaContext) -> Any:
            value, error = orchestrator.invoke(context, event)
            if error is not None:
                raise error
            return value

        if callable(handler):
            update_wrapper(
                handle_invocation,
                handler,
                assigned=("__module__", "__name__", "__qualname__", "__doc__"),
                updated=(),
            )
            # the entry point takes (event, context), not the handler's arguments
            del handle_invocation.__wrapped__
        return handle_invocation

    def register_metric(self, name: str, value: float) -> None:
        """Set a custom gauge reported with every invocation.

        Args:
            name: Metric name.
            value: Gauge value.
        """
        self.registry.set_gauge(name, value)

    def register_counter(self, name: str, value: float = 1.0) -> None:
        """Add to a custom delta counter reported with the next invocation.

        Args:
            name: Metric name.
            value: Increment.
        """
        self.registry.increment_counter(name, value)


def wrapper(handler: Any) -> LambdaEntryPoint:
    """Wrap a handler with an agent configured from the environment.

    Args:
        handler: User handler.

    Returns:
        Lambda entry point.
    """
    return WavefrontAgent().wrap_handler(handler)
