"""Run one invocation: decode, call, count, time and report.

Lifecycle per invocation::

    IDLE -> PAYLOAD_DECODING -> INVOKING -> COMPLETED | PANICKED -> REPORTING -> IDLE
                             \\-> REPORTING (decode failure)

The caller-visible outcome is never changed: returned values and errors are
passed back as-is and a raised exception is re-raised after reporting.
"""

import logging
import time
from typing import Any

from wavefront_lambda.exceptions.invocation_errors import PayloadDecodingError
from wavefront_lambda.handler.adapter import Invoker, encode_payload
from wavefront_lambda.handler.models import HandlerResult
from wavefront_lambda.invocation.models import InvocationRecord, InvocationState
from wavefront_lambda.logging.adapters.lambda_adapter import lambda_logging_context
from wavefront_lambda.metrics.registry import MetricsRegistry
from wavefront_lambda.reporting.reporter import Reporter
from wavefront_lambda.types import LambdaContext, LambdaEvent

logger = logging.getLogger(__name__)


class InvocationOrchestrator:
    """Instrument every call of one adapted handler.

    Without a reporter the orchestrator is disabled: it decodes and calls the
    handler but touches no counters and reports nothing.
    """

    def __init__(
        self,
        invoker: Invoker,
        registry: MetricsRegistry,
        reporter: Reporter | None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            invoker: Adapted handler.
            registry: Shared metrics registry.
            reporter: Reporter for the metric batch, None when disabled.
        """
        self._invoker = invoker
        self._registry = registry
        self._reporter = reporter

    @property
    def instrumented(self) -> bool:
        """Whether invocations are counted and reported."""
        return self._reporter is not None

    def _decode(self, event: LambdaEvent) -> Any:
        return self._invoker.decode(encode_payload(event))

    def invoke(self, context: LambdaContext, event: LambdaEvent) -> HandlerResult:
        """Run one invocation.

        Args:
            context: Lambda context, passed to the handler unchanged.
            event: Event from the runtime, or raw JSON bytes.

        Returns:
            The handler's (value, error), or (None, PayloadDecodingError).
        """
        if not self.instrumented:
            try:
                decoded = self._decode(event)
            except PayloadDecodingError as error:
                return HandlerResult(error=error)
            return self._invoker.call(context, decoded)

        with lambda_logging_context(context):
            return self._invoke_instrumented(context, event)

    def _invoke_instrumented(self, context: LambdaContext, event: LambdaEvent) -> HandlerResult:
        record = InvocationRecord(started_at=time.perf_counter())
        record.transition(InvocationState.PAYLOAD_DECODING)
        self._registry.record_invocation()

        try:
            decoded = self._decode(event)
        except PayloadDecodingError as error:
            logger.warning(
                "Payload rejected before calling handler: %s",
                error.message,
                extra=error.to_log_dict(),
            )
            self._record_failure(record)
            self._report(context, record)
            return HandlerResult(error=error)

        record.transition(InvocationState.INVOKING)
        if self._registry.mark_cold_start():
            logger.debug("Cold start")

        try:
            result = self._invoker.call(context, decoded)
        except BaseException:
            record.transition(InvocationState.PANICKED)
            self._record_failure(record)
            self._report(context, record)
            raise

        record.transition(InvocationState.COMPLETED)
        if result.error is not None:
            self._record_failure(record)
        self._report(context, record)
        return result

    def _record_failure(self, record: InvocationRecord) -> None:
        if record.failed:
            return
        record.failed = True
        self._registry.record_error()

    def _report(self, context: LambdaContext, record: InvocationRecord) -> None:
        record.transition(InvocationState.REPORTING)
        record.duration_millis = (time.perf_counter() - record.started_at) * 1000
        self._registry.record_duration(record.duration_millis)
        try:
            if self._reporter is not None:
                self._reporter.report(context)
        except Exception:
            logger.exception("Failed to report invocation metrics")
        finally:
            record.transition(InvocationState.IDLE)
