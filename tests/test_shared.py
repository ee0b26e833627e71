"""
Unit tests for the shared config, errors, logging and metrics helpers.
"""

import pytest
import structlog
from pydantic import ValidationError

from codeauth.shared.config import ClientConfig, CodeAuthSettings, get_settings
from codeauth.shared.errors import (
    AlreadyInitializedError,
    CodeAuthException,
    NotInitializedError,
)
from codeauth.shared.logging import (
    add_correlation_context,
    add_service_context,
    clear_context,
    configure_logging,
    get_logger,
    redact_token,
    set_request_id,
)
from codeauth.shared.metrics import MetricsCollector


class TestConfig:
    """Test cases for settings."""

    def test_settings_from_environment(self, monkeypatch):
        """Test CODEAUTH_* variables are read."""
        monkeypatch.setenv("CODEAUTH_ENDPOINT", "api.example.com")
        monkeypatch.setenv("CODEAUTH_PROJECT_ID", "proj1")
        monkeypatch.setenv("CODEAUTH_USE_CACHE", "false")
        monkeypatch.setenv("CODEAUTH_CACHE_DURATION", "60")

        settings = CodeAuthSettings()

        assert settings.endpoint == "api.example.com"
        assert settings.project_id == "proj1"
        assert settings.use_cache is False
        assert settings.cache_duration == 60

    def test_get_settings_overrides(self, monkeypatch):
        """Test keyword overrides beat the environment."""
        monkeypatch.setenv("CODEAUTH_CACHE_DURATION", "60")

        assert get_settings(cache_duration=20).cache_duration == 20

    def test_negative_cache_duration_rejected(self):
        """Test the cache window cannot be negative."""
        with pytest.raises(ValidationError):
            ClientConfig(endpoint="api.example.com", project_id="proj1", cache_duration=-1)

    def test_client_config_is_frozen(self):
        """Test the client configuration cannot be mutated."""
        config = ClientConfig(endpoint="api.example.com", project_id="proj1")

        with pytest.raises(ValidationError):
            config.project_id = "proj2"
        assert config.base_url == "https://api.example.com"


class TestErrors:
    """Test cases for lifecycle exceptions."""

    def test_codes(self):
        assert NotInitializedError().code == "NOT_INITIALIZED"
        assert AlreadyInitializedError().code == "ALREADY_INITIALIZED"
        assert isinstance(NotInitializedError(), CodeAuthException)


class TestLogging:
    """Test cases for logging processors."""

    def teardown_method(self):
        clear_context()

    def test_correlation_context(self):
        """Test the request id is attached to events."""
        request_id = set_request_id("req-1")

        event = add_correlation_context(None, "info", {"event": "x"})

        assert request_id == "req-1"
        assert event["request_id"] == "req-1"

    def test_generated_request_id(self):
        assert len(set_request_id()) == 36

    def test_no_request_id(self):
        assert "request_id" not in add_correlation_context(None, "info", {"event": "x"})

    def test_service_context(self):
        """Test the component is derived from the logger name."""
        event = add_service_context(None, "info", {"logger": "codeauth.session_cache"})

        assert event["component"] == "session_cache"

    def test_configure_logging(self, caplog):
        """Test configured loggers emit JSON with correlation fields."""
        configure_logging("codeauth", "debug")
        try:
            set_request_id("req-2")
            get_logger("codeauth.transport").info("Request sent", path="/session/info")
            output = caplog.text
        finally:
            structlog.contextvars.clear_contextvars()
            structlog.reset_defaults()

        assert "\"event\": \"Request sent\"" in output
        assert "\"request_id\": \"req-2\"" in output
        assert "\"component\": \"transport\"" in output

    def test_redact_token(self):
        assert redact_token("abcdefghijklmnop") == "abcd...mnop"
        assert redact_token("short") == "***"
        assert redact_token(None) == ""


class TestMetrics:
    """Test cases for MetricsCollector."""

    def test_collectors_do_not_share_registries(self):
        """Test two collectors count independently."""
        first = MetricsCollector()
        second = MetricsCollector()

        first.record_cache_hit()

        assert first.get_sample_value("codeauth_cache_hits_total") == 1
        assert second.get_sample_value("codeauth_cache_hits_total") == 0

    def test_time_request(self):
        """Test the timing context records the outcome set inside it."""
        metrics = MetricsCollector()

        with metrics.time_request("/session/info") as outcome:
            outcome["value"] = "connection_error"

        assert metrics.get_sample_value(
            "codeauth_requests_total", {"path": "/session/info", "outcome": "connection_error"}
        ) == 1
