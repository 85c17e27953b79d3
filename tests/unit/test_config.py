"""Tests for agent configuration."""

import pytest

from wavefront_lambda.config import AgentConfiguration, load_agent_configuration
from wavefront_lambda.exceptions import ConfigurationError, MissingSettingError

URL = "https://example.wavefront.com"


@pytest.fixture()
def endpoint_env(monkeypatch):
    monkeypatch.setenv("WAVEFRONT_URL", URL)
    monkeypatch.setenv("WAVEFRONT_API_TOKEN", "env-token")


class TestDefaults:
    def test_defaults(self, endpoint_env):
        configuration = load_agent_configuration()
        assert configuration.enabled is True
        assert configuration.url == URL
        assert configuration.batch_size == 10_000
        assert configuration.max_buffer_size == 50_000
        assert configuration.flush_interval_seconds == 1
        assert configuration.point_tags == {}
        assert configuration.report_standard_metrics is True

    def test_token_hidden_from_repr(self, endpoint_env):
        assert "env-token" not in repr(load_agent_configuration())

    def test_frozen(self, endpoint_env):
        configuration = load_agent_configuration()
        with pytest.raises(ValueError):
            configuration.batch_size = 5


class TestPrecedence:
    def test_override_used_without_env(self, endpoint_env):
        assert load_agent_configuration(batch_size=25).batch_size == 25

    def test_env_beats_override(self, endpoint_env, monkeypatch):
        monkeypatch.setenv("WAVEFRONT_BATCH_SIZE", "50")
        assert load_agent_configuration(batch_size=25).batch_size == 50

    def test_empty_env_ignored(self, endpoint_env, monkeypatch):
        monkeypatch.setenv("WAVEFRONT_BATCH_SIZE", "")
        assert load_agent_configuration(batch_size=25).batch_size == 25

    def test_none_override_means_unset(self, endpoint_env):
        assert load_agent_configuration(batch_size=None).batch_size == 10_000

    def test_url_and_token_from_code(self):
        configuration = load_agent_configuration(url=URL, api_token="code-token")
        assert configuration.api_token == "code-token"

    def test_point_tags_from_env(self, endpoint_env, monkeypatch):
        monkeypatch.setenv("WAVEFRONT_POINT_TAGS", '{"team": "payments"}')
        assert load_agent_configuration(point_tags={"team": "other"}).point_tags == {"team": "payments"}


class TestEnabledFlag:
    def test_disabled_needs_no_endpoint(self, monkeypatch):
        monkeypatch.setenv("WAVEFRONT_ENABLED", "false")
        configuration = load_agent_configuration()
        assert configuration.enabled is False
        assert configuration.url is None

    @pytest.mark.parametrize("raw", ["FALSE", "False", "0"])
    def test_disabled_spellings(self, monkeypatch, raw):
        monkeypatch.setenv("WAVEFRONT_ENABLED", raw)
        assert load_agent_configuration().enabled is False

    def test_disabled_from_code(self):
        assert load_agent_configuration(enabled=False).enabled is False


class TestStandardMetricsFlag:
    def test_unprefixed_env(self, endpoint_env, monkeypatch):
        monkeypatch.setenv("REPORT_STANDARD_METRICS", "false")
        assert load_agent_configuration().report_standard_metrics is False

    def test_from_code(self, endpoint_env):
        assert load_agent_configuration(report_standard_metrics=False).report_standard_metrics is False


class TestValidation:
    def test_missing_url(self, monkeypatch):
        monkeypatch.setenv("WAVEFRONT_API_TOKEN", "env-token")
        with pytest.raises(MissingSettingError) as excinfo:
            load_agent_configuration()
        assert excinfo.value.context["setting_name"] == "WAVEFRONT_URL"

    def test_missing_token(self, monkeypatch):
        monkeypatch.setenv("WAVEFRONT_URL", URL)
        with pytest.raises(MissingSettingError) as excinfo:
            load_agent_configuration()
        assert excinfo.value.context["setting_name"] == "WAVEFRONT_API_TOKEN"

    def test_unparseable_integer(self, endpoint_env, monkeypatch):
        monkeypatch.setenv("WAVEFRONT_BATCH_SIZE", "lots")
        with pytest.raises(ConfigurationError, match="Invalid Wavefront configuration"):
            load_agent_configuration()

    def test_non_positive_integer(self, endpoint_env):
        with pytest.raises(ConfigurationError):
            load_agent_configuration(flush_interval_seconds=0)

    def test_model_raises_validation_error_directly(self):
        with pytest.raises(ValueError):
            AgentConfiguration()
