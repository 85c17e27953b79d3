"""Wavefront metric sender interface and direct-ingestion factory."""

from collections.abc import Callable
from typing import Protocol

from wavefront_sdk.direct import WavefrontDirectClient

from wavefront_lambda.config import AgentConfiguration


class MetricSender(Protocol):
    """Subset of the ``wavefront_sdk`` client used by the reporter.

    Batching, retries and buffering are the sender's responsibility.
    """

    def send_metric(
        self,
        name: str,
        value: float,
        timestamp: int | None,
        source: str,
        tags: dict[str, str] | None,
    ) -> None:
        """Send a gauge point."""
        ...

    def send_delta_counter(
        self,
        name: str,
        value: float,
        source: str,
        tags: dict[str, str] | None,
    ) -> None:
        """Send a delta counter increment."""
        ...

    def flush_now(self) -> None:
        """Send everything buffered so far."""
        ...

    def close(self) -> None:
        """Flush and release the sender's resources."""
        ...


SenderFactory = Callable[[], MetricSender]


def create_direct_sender(configuration: AgentConfiguration) -> MetricSender:
    """Open a direct-ingestion client for one report.

    Args:
        configuration: Agent configuration with URL and API token set.

    Returns:
        A new Wavefront direct client.
    """
    return WavefrontDirectClient(
        server=configuration.url,
        token=configuration.api_token,
        max_queue_size=configuration.max_buffer_size,
        batch_size=configuration.batch_size,
        flush_interval_seconds=configuration.flush_interval_seconds,
    )
