"""Unit tests for settings and logging configuration."""
import logging

import pytest
import structlog
from pydantic import ValidationError

from regex_record.config import RegexRecordSettings, configure_logging, get_settings
from regex_record.models import FieldNaming, MissingFieldPolicy, NoMatchPolicy


class TestRegexRecordSettings:
    """Test RegexRecordSettings defaults and environment loading."""

    def test_defaults(self):
        settings = RegexRecordSettings()

        assert settings.log_level == "INFO"
        assert settings.json_logs is True
        assert settings.no_match is NoMatchPolicy.EMPTY
        assert settings.field_naming is FieldNaming.EXACT
        assert settings.missing_fields is MissingFieldPolicy.ZERO
        assert settings.pattern_cache_size == 256

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("REGEX_RECORD_NO_MATCH", "raise")
        monkeypatch.setenv("REGEX_RECORD_FIELD_NAMING", "snake_case")
        monkeypatch.setenv("REGEX_RECORD_MISSING_FIELDS", "error")
        monkeypatch.setenv("regex_record_pattern_cache_size", "10")

        settings = RegexRecordSettings()

        assert settings.no_match is NoMatchPolicy.RAISE
        assert settings.field_naming is FieldNaming.SNAKE_CASE
        assert settings.missing_fields is MissingFieldPolicy.ERROR
        assert settings.pattern_cache_size == 10

    def test_rejects_invalid_policy(self, monkeypatch):
        monkeypatch.setenv("REGEX_RECORD_NO_MATCH", "sometimes")

        with pytest.raises(ValidationError):
            RegexRecordSettings()

    def test_rejects_negative_cache_size(self):
        with pytest.raises(ValidationError):
            RegexRecordSettings(pattern_cache_size=-1)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    """Test structlog configuration."""

    @pytest.mark.parametrize("json_logs", [True, False])
    def test_configures_structlog(self, reset_structlog, json_logs):
        configure_logging(log_level="DEBUG", json_logs=json_logs)

        config = structlog.get_config()
        renderer = config["processors"][-1]
        expected = structlog.processors.JSONRenderer if json_logs else structlog.dev.ConsoleRenderer
        assert isinstance(renderer, expected)
        assert config["wrapper_class"] is structlog.stdlib.BoundLogger

    def test_logger_emits_events(self, reset_structlog, caplog):
        configure_logging(log_level="INFO", json_logs=True)

        with caplog.at_level(logging.INFO, logger="regex_record.test"):
            structlog.get_logger("regex_record.test").info("event_logged", key="value")

        assert any("event_logged" in record.getMessage() for record in caplog.records)
