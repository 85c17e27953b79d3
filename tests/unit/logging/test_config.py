"""Tests for logging configuration."""

from wavefront_lambda.logging.config import LogFormat, LoggingConfig, LogLevel, get_logging_config


class TestLogFormat:
    def test_values(self):
        assert LogFormat.JSON.value == "json"
        assert LogFormat.HUMAN.value == "human"


class TestLoggingConfig:
    def test_defaults(self):
        config = LoggingConfig()
        assert config.log_level == LogLevel.INFO
        assert config.log_format == LogFormat.JSON
        assert config.service_name == "wavefront-lambda"
        assert config.include_location is False

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert LoggingConfig().log_level == LogLevel.DEBUG

    def test_log_format_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "human")
        assert LoggingConfig().log_format == LogFormat.HUMAN

    def test_service_name_from_env(self, monkeypatch):
        monkeypatch.setenv("SERVICE_NAME", "orders")
        assert LoggingConfig().service_name == "orders"

    def test_empty_env_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "")
        assert LoggingConfig().log_level == LogLevel.INFO


class TestGetLoggingConfig:
    def test_returns_cached_config(self):
        get_logging_config.cache_clear()
        assert get_logging_config() is get_logging_config()
        get_logging_config.cache_clear()
