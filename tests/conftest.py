"""Shared test fixtures."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from wavefront_lambda.logging.context import clear_context

FUNCTION_ARN = "arn:aws:lambda:us-west-2:123456789012:function:orders"


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings."""
    env_vars_to_clear = [
        "WAVEFRONT_ENABLED",
        "WAVEFRONT_URL",
        "WAVEFRONT_API_TOKEN",
        "WAVEFRONT_BATCH_SIZE",
        "WAVEFRONT_MAX_BUFFER_SIZE",
        "WAVEFRONT_FLUSH_INTERVAL_SECONDS",
        "WAVEFRONT_POINT_TAGS",
        "WAVEFRONT_REPORT_STANDARD_METRICS",
        "REPORT_STANDARD_METRICS",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "SERVICE_NAME",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _clear_logging_context():
    """Clear logging context around each test."""
    clear_context()
    yield
    clear_context()


@dataclass
class FakeLambdaContext:
    """Stand-in for the runtime's context object."""

    function_name: str = "orders"
    function_version: str = "$LATEST"
    invoked_function_arn: str = FUNCTION_ARN
    memory_limit_in_mb: int = 128
    aws_request_id: str = "request-1"
    log_group_name: str = "/aws/lambda/orders"
    log_stream_name: str = "2024/01/01/[$LATEST]abc"

    def get_remaining_time_in_millis(self) -> int:
        return 3000


@dataclass
class RecordingSender:
    """Sender that keeps every call in memory."""

    metrics: list[tuple[Any, ...]] = field(default_factory=list)
    delta_counters: list[tuple[Any, ...]] = field(default_factory=list)
    flushed: int = 0
    closed: int = 0
    failing_metric: str | None = None

    def send_metric(self, name, value, timestamp, source, tags):
        if name == self.failing_metric:
            raise ConnectionError("ingestion endpoint unreachable")
        self.metrics.append((name, value, timestamp, source, dict(tags)))

    def send_delta_counter(self, name, value, source, tags):
        if name == self.failing_metric:
            raise ConnectionError("ingestion endpoint unreachable")
        self.delta_counters.append((name, value, source, dict(tags)))

    def flush_now(self):
        self.flushed += 1

    def close(self):
        self.closed += 1

    def metric_names(self) -> list[str]:
        return [entry[0] for entry in self.metrics]

    def delta_counter_values(self) -> dict[str, float]:
        return {entry[0]: entry[1] for entry in self.delta_counters}


@pytest.fixture()
def lambda_context() -> FakeLambdaContext:
    return FakeLambdaContext()


@pytest.fixture()
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture()
def context_factory() -> type[FakeLambdaContext]:
    return FakeLambdaContext
