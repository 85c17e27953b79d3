"""Tests for the invocation orchestrator."""

import threading
import traceback
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from wavefront_lambda.constants import (
    COLD_STARTS_METRIC,
    DURATION_METRIC,
    ERRORS_METRIC,
    INVOCATIONS_METRIC,
)
from wavefront_lambda.exceptions import InvalidHandlerError, PayloadDecodingError
from wavefront_lambda.handler.adapter import adapt_handler
from wavefront_lambda.handler.models import HandlerResult
from wavefront_lambda.invocation.orchestrator import InvocationOrchestrator
from wavefront_lambda.logging.context import get_correlation_id
from wavefront_lambda.metrics.registry import MetricsRegistry
from wavefront_lambda.reporting.reporter import Reporter


class Order(BaseModel):
    order_id: str


def _orchestrator(handler, sender, registry=None):
    registry = registry or MetricsRegistry()
    reporter = Reporter(registry, lambda: sender)
    return InvocationOrchestrator(adapt_handler(handler), registry, reporter), registry


class TestSuccessfulInvocation:
    def test_returns_handler_result(self, lambda_context, sender):
        def handler(event: Order) -> tuple[str, Exception | None]:
            return event.order_id, None

        orchestrator, _ = _orchestrator(handler, sender)
        assert orchestrator.invoke(lambda_context, {"order_id": "o-1"}) == HandlerResult("o-1", None)

    def test_counts_invocation_and_cold_start(self, lambda_context, sender):
        def handler() -> None:
            pass

        orchestrator, registry = _orchestrator(handler, sender)
        orchestrator.invoke(lambda_context, {})

        snapshot = registry.snapshot()
        assert snapshot.invocation_count == 1
        assert snapshot.cold_start_count == 1
        assert snapshot.error_count == 0
        assert snapshot.last_duration_millis >= 0

    def test_reports_after_each_invocation(self, lambda_context, sender):
        def handler() -> None:
            pass

        orchestrator, _ = _orchestrator(handler, sender)
        orchestrator.invoke(lambda_context, {})
        orchestrator.invoke(lambda_context, {})

        assert sender.closed == 2
        assert sender.metric_names().count(DURATION_METRIC) == 2
        # the second report carries only the second invocation
        assert sender.delta_counters[-1][:2] == (INVOCATIONS_METRIC, 1)

    def test_cold_start_reported_once(self, lambda_context, sender):
        def handler() -> None:
            pass

        orchestrator, registry = _orchestrator(handler, sender)
        for _ in range(3):
            orchestrator.invoke(lambda_context, {})

        cold_starts = [entry for entry in sender.delta_counters if entry[0] == COLD_STARTS_METRIC]
        assert len(cold_starts) == 1
        assert registry.snapshot().cold_start_count == 1
        assert registry.snapshot().invocation_count == 3

    def test_accepts_raw_json_bytes(self, lambda_context, sender):
        def handler(event: Order) -> tuple[str, Exception | None]:
            return event.order_id, None

        orchestrator, _ = _orchestrator(handler, sender)
        assert orchestrator.invoke(lambda_context, b'{"order_id": "o-2"}').value == "o-2"

    def test_binds_logging_context_during_call(self, lambda_context, sender):
        seen = []

        def handler() -> None:
            seen.append(get_correlation_id())

        orchestrator, _ = _orchestrator(handler, sender)
        orchestrator.invoke(lambda_context, {})

        assert seen == ["request-1"]
        assert get_correlation_id() == ""


class TestFailedInvocation:
    def test_returned_error_counted_and_returned(self, lambda_context, sender):
        failure = ValueError("some error")

        def handler() -> Exception | None:
            return failure

        orchestrator, registry = _orchestrator(handler, sender)
        result = orchestrator.invoke(lambda_context, {})

        assert result.error is failure
        assert registry.snapshot().error_count == 1
        assert sender.delta_counter_values()[ERRORS_METRIC] == 1

    def test_decode_failure_counted_once_without_cold_start(self, lambda_context, sender):
        calls = []

        def handler(event: Order) -> None:
            calls.append(event)

        orchestrator, registry = _orchestrator(handler, sender)
        result = orchestrator.invoke(lambda_context, {"unexpected": True})

        assert calls == []
        assert isinstance(result.error, PayloadDecodingError)
        snapshot = registry.snapshot()
        assert snapshot.invocation_count == 1
        assert snapshot.error_count == 1
        assert snapshot.cold_start_count == 0
        assert sender.closed == 1

    def test_raised_exception_reraised_after_reporting(self, lambda_context, sender):
        failure = RuntimeError("boom")

        def handler() -> None:
            raise failure

        orchestrator, registry = _orchestrator(handler, sender)
        with pytest.raises(RuntimeError) as excinfo:
            orchestrator.invoke(lambda_context, {})

        assert excinfo.value is failure
        assert registry.snapshot().invocation_count == 1
        assert registry.snapshot().error_count == 1
        assert sender.delta_counter_values()[ERRORS_METRIC] == 1
        assert sender.closed == 1
        frames = [frame.name for frame in traceback.extract_tb(excinfo.value.__traceback__)]
        assert frames[-1] == "handler"

    def test_invalid_handler_fails_every_invocation(self, lambda_context, sender):
        def handler(a, b, c):
            pass

        orchestrator, registry = _orchestrator(handler, sender)
        first = orchestrator.invoke(lambda_context, {})
        second = orchestrator.invoke(lambda_context, {})

        assert isinstance(first.error, InvalidHandlerError)
        assert first.error is second.error
        assert registry.snapshot().error_count == 2


class TestReportingFailures:
    def test_reporter_exception_does_not_change_outcome(self, lambda_context):
        def handler() -> tuple[int, Exception | None]:
            return 7, None

        registry = MetricsRegistry()
        reporter = MagicMock(spec=Reporter)
        reporter.report.side_effect = RuntimeError("reporter broke")
        orchestrator = InvocationOrchestrator(adapt_handler(handler), registry, reporter)

        assert orchestrator.invoke(lambda_context, {}) == HandlerResult(7, None)
        reporter.report.assert_called_once_with(lambda_context)

    def test_sender_failure_does_not_change_outcome(self, lambda_context, sender):
        sender.failing_metric = DURATION_METRIC

        def handler() -> tuple[int, Exception | None]:
            return 7, None

        orchestrator, _ = _orchestrator(handler, sender)
        assert orchestrator.invoke(lambda_context, {}).value == 7
        assert DURATION_METRIC not in sender.metric_names()


class TestDisabled:
    def test_calls_handler_without_metrics(self, lambda_context):
        def handler(event: Order) -> tuple[str, Exception | None]:
            return event.order_id, None

        registry = MetricsRegistry()
        orchestrator = InvocationOrchestrator(adapt_handler(handler), registry, None)

        assert orchestrator.instrumented is False
        assert orchestrator.invoke(lambda_context, {"order_id": "o-3"}).value == "o-3"
        assert registry.snapshot().invocation_count == 0
        assert registry.snapshot().cold_start_count == 0

    def test_errors_not_counted(self, lambda_context):
        def handler() -> None:
            raise KeyError("missing")

        registry = MetricsRegistry()
        orchestrator = InvocationOrchestrator(adapt_handler(handler), registry, None)

        with pytest.raises(KeyError):
            orchestrator.invoke(lambda_context, {})
        assert registry.snapshot().error_count == 0

    def test_does_not_bind_logging_context(self, lambda_context):
        seen = []

        def handler() -> None:
            seen.append(get_correlation_id())

        orchestrator = InvocationOrchestrator(adapt_handler(handler), MetricsRegistry(), None)
        orchestrator.invoke(lambda_context, {})
        assert seen == [""]

    def test_decode_failure_returned(self, lambda_context):
        def handler(event: Order) -> None:
            pass

        orchestrator = InvocationOrchestrator(adapt_handler(handler), MetricsRegistry(), None)
        assert isinstance(orchestrator.invoke(lambda_context, {}).error, PayloadDecodingError)


class TestConcurrency:
    def test_concurrent_invocations_count_cold_start_once(self, context_factory):
        barrier = threading.Barrier(8)

        def handler() -> None:
            barrier.wait()

        registry = MetricsRegistry()
        reporter = MagicMock(spec=Reporter)
        orchestrator = InvocationOrchestrator(adapt_handler(handler), registry, reporter)

        def invoke(index: int) -> HandlerResult:
            return orchestrator.invoke(context_factory(aws_request_id=f"request-{index}"), {})

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(invoke, range(8)))

        assert all(result.error is None for result in results)
        snapshot = registry.snapshot()
        assert snapshot.cold_start_count == 1
        assert snapshot.invocation_count == 8
        assert reporter.report.call_count == 8
