"""Process-wide invocation metrics shared by concurrent invocations."""

import threading

from wavefront_lambda.metrics.models import CounterDeltas, MetricsSnapshot


class MetricsRegistry:
    """Thread-safe counters, duration gauge, cold-start flag and custom metrics.

    Counters only grow until ``clear`` is called. Reporting reads increments
    through ``take_deltas``, which advances a baseline instead of resetting
    the totals.
    """

    def __init__(self) -> None:
        """Initialize all values to zero."""
        self._lock = threading.Lock()
        self._cold_started = False
        self._cold_start_count = 0.0
        self._invocation_count = 0.0
        self._error_count = 0.0
        self._last_duration_millis = 0.0
        self._reported = CounterDeltas()
        self._custom_gauges: dict[str, float] = {}
        self._custom_counters: dict[str, float] = {}

    def mark_cold_start(self) -> bool:
        """Count the cold start if no invocation has been counted yet.

        Returns:
            True only for the single caller that performed the increment.
        """
        with self._lock:
            if self._cold_started:
                return False
            self._cold_started = True
            self._cold_start_count += 1
            return True

    def record_invocation(self) -> None:
        """Count one invocation attempt."""
        with self._lock:
            self._invocation_count += 1

    def record_error(self) -> None:
        """Count one failed invocation."""
        with self._lock:
            self._error_count += 1

    def record_duration(self, duration_millis: float) -> None:
        """Overwrite the last invocation duration.

        Args:
            duration_millis: Wall-clock duration in milliseconds.
        """
        with self._lock:
            self._last_duration_millis = duration_millis

    def snapshot(self) -> MetricsSnapshot:
        """Return a consistent copy of the standard metrics."""
        with self._lock:
            return MetricsSnapshot(
                cold_start_count=self._cold_start_count,
                invocation_count=self._invocation_count,
                error_count=self._error_count,
                last_duration_millis=self._last_duration_millis,
            )

    def take_deltas(self) -> CounterDeltas:
        """Return counter increments since the previous call and advance the baseline."""
        with self._lock:
            deltas = CounterDeltas(
                cold_starts=self._cold_start_count - self._reported.cold_starts,
                invocations=self._invocation_count - self._reported.invocations,
                errors=self._error_count - self._reported.errors,
            )
            self._reported = CounterDeltas(
                cold_starts=self._cold_start_count,
                invocations=self._invocation_count,
                errors=self._error_count,
            )
            return deltas

    def set_gauge(self, name: str, value: float) -> None:
        """Set a custom gauge; its last value is reported on every invocation."""
        with self._lock:
            self._custom_gauges[name] = float(value)

    def increment_counter(self, name: str, value: float = 1.0) -> None:
        """Add to a custom delta counter, drained by the next report."""
        with self._lock:
            self._custom_counters[name] = self._custom_counters.get(name, 0.0) + float(value)

    def custom_gauges(self) -> dict[str, float]:
        """Return a copy of the custom gauges."""
        with self._lock:
            return dict(self._custom_gauges)

    def drain_custom_counters(self) -> dict[str, float]:
        """Return and reset the pending custom counter increments."""
        with self._lock:
            counters = self._custom_counters
            self._custom_counters = {}
            return counters

    def clear(self) -> None:
        """Reset every value, including the cold-start flag."""
        with self._lock:
            self._cold_started = False
            self._cold_start_count = 0.0
            self._invocation_count = 0.0
            self._error_count = 0.0
            self._last_duration_millis = 0.0
            self._reported = CounterDeltas()
            self._custom_gauges.clear()
            self._custom_counters.clear()
