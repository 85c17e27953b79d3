"""Tests for logging context management."""

import threading

from wavefront_lambda.logging.context import (
    clear_context,
    get_correlation_id,
    get_extra_context,
    set_correlation_id,
    set_extra_context,
)


class TestCorrelationId:
    def test_default_empty(self):
        assert get_correlation_id() == ""

    def test_set_and_get(self):
        set_correlation_id("request-123")
        assert get_correlation_id() == "request-123"

    def test_isolated_per_thread(self):
        set_correlation_id("main")
        seen = []

        def worker():
            set_correlation_id("worker")
            seen.append(get_correlation_id())

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert seen == ["worker"]
        assert get_correlation_id() == "main"


class TestExtraContext:
    def test_default_empty(self):
        assert get_extra_context() == {}

    def test_multiple_values(self):
        set_extra_context(function_name="orders", function_version="3")
        assert get_extra_context() == {"function_name": "orders", "function_version": "3"}

    def test_updates_merge(self):
        set_extra_context(function_name="orders")
        set_extra_context(function_version="3")
        assert get_extra_context()["function_name"] == "orders"

    def test_returns_copy(self):
        set_extra_context(key="value")
        first = get_extra_context()
        second = get_extra_context()
        assert first == second
        assert first is not second


class TestClearContext:
    def test_clears_correlation_id(self):
        set_correlation_id("test")
        clear_context()
        assert get_correlation_id() == ""

    def test_clears_extra_context(self):
        set_extra_context(key="value")
        clear_context()
        assert get_extra_context() == {}
