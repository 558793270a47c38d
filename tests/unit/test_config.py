"""
Unit tests for configuration loader (booker_suite/config/settings.py)

Tests covering:
- SecretRedactionFilter for logging
- Settings precedence: defaults, YAML file, environment, explicit overrides
- Endpoint URL construction
- Invalid configuration handling
"""

import logging

import pytest

from booker_suite.config.settings import (
    DEFAULT_BASE_URL,
    DEFAULT_NONEXISTENT_BOOKING_ID,
    ConfigurationError,
    SecretRedactionFilter,
    Settings,
    live_tests_enabled,
)

MISSING_FILE = "/nonexistent/booker.yaml"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove configuration-related environment variables for each test."""
    for key in (
        "BOOKER_BASE_URL",
        "BOOKER_USERNAME",
        "BOOKER_PASSWORD",
        "BOOKER_NONEXISTENT_BOOKING_ID",
        "BOOKER_CONFIG_FILE",
        "RUN_BOOKER_LIVE_TESTS",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def yaml_file(tmp_path):
    def _write(content):
        path = tmp_path / "booker.yaml"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


class TestSecretRedactionFilter:
    """Tests for SecretRedactionFilter class."""

    def _record(self, msg, args=()):
        return logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg=msg,
            args=args,
            exc_info=None,
        )

    def test_redaction_filter_initialization(self):
        filter_obj = SecretRedactionFilter()
        assert filter_obj.secrets == {}
        assert filter_obj.redacted_values == set()

    def test_redaction_filter_redacts_message(self):
        filter_obj = SecretRedactionFilter({"password": "password123"})
        record = self._record('{"message": "POST /auth", "body": "password123"}')

        assert filter_obj.filter(record) is True
        assert "password123" not in record.msg
        assert "***REDACTED***" in record.msg

    def test_add_secret_redacts_runtime_token(self):
        filter_obj = SecretRedactionFilter({"password": "password123"})
        filter_obj.add_secret("abc123def456")
        record = self._record("Cookie: token=%s", ("abc123def456",))

        filter_obj.filter(record)

        assert record.args == ("***REDACTED***",)

    def test_redaction_filter_ignores_short_strings(self):
        filter_obj = SecretRedactionFilter({"pin": "123"})
        assert "123" not in filter_obj.redacted_values

    def test_longer_secret_is_redacted_whole(self):
        filter_obj = SecretRedactionFilter({"a": "secret", "b": "secret-token"})
        record = self._record("value=secret-token")

        filter_obj.filter(record)

        assert record.msg == "value=***REDACTED***"


class TestSettings:
    """Tests for Settings resolution."""

    def test_defaults(self):
        settings = Settings(config_path=MISSING_FILE)

        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.username == "admin"
        assert settings.password == "password123"
        assert settings.nonexistent_booking_id == DEFAULT_NONEXISTENT_BOOKING_ID

    def test_endpoint_urls(self):
        settings = Settings(config_path=MISSING_FILE, base_url="https://booker.local/")

        assert settings.booking_url() == "https://booker.local/booking"
        assert settings.booking_url(42) == "https://booker.local/booking/42"
        assert settings.auth_url == "https://booker.local/auth"
        assert settings.ping_url == "https://booker.local/ping"

    def test_yaml_file_overrides_defaults(self, yaml_file):
        path = yaml_file("base_url: https://staging.booker\nusername: tester\n")

        settings = Settings(config_path=path)

        assert settings.base_url == "https://staging.booker"
        assert settings.username == "tester"
        assert settings.password == "password123"

    def test_environment_overrides_yaml(self, yaml_file, monkeypatch):
        path = yaml_file("base_url: https://staging.booker\n")
        monkeypatch.setenv("BOOKER_BASE_URL", "https://env.booker")
        monkeypatch.setenv("BOOKER_NONEXISTENT_BOOKING_ID", "123")

        settings = Settings(config_path=path)

        assert settings.base_url == "https://env.booker"
        assert settings.nonexistent_booking_id == 123

    def test_explicit_overrides_win(self, monkeypatch):
        monkeypatch.setenv("BOOKER_BASE_URL", "https://env.booker")

        settings = Settings(config_path=MISSING_FILE, base_url="https://cli.booker", username=None)

        assert settings.base_url == "https://cli.booker"
        assert settings.username == "admin"

    def test_config_file_from_environment(self, yaml_file, monkeypatch):
        path = yaml_file("password: s3cret-pass\n")
        monkeypatch.setenv("BOOKER_CONFIG_FILE", path)

        assert Settings().password == "s3cret-pass"

    def test_empty_yaml_file_uses_defaults(self, yaml_file):
        assert Settings(config_path=yaml_file("")).base_url == DEFAULT_BASE_URL

    def test_unknown_yaml_keys_are_ignored(self, yaml_file):
        settings = Settings(config_path=yaml_file("timeout: 5\nusername: other\n"))

        assert settings.username == "other"
        assert not hasattr(settings, "timeout")

    def test_invalid_yaml_raises(self, yaml_file):
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            Settings(config_path=yaml_file("base_url: [unclosed\n"))

    def test_non_mapping_yaml_raises(self, yaml_file):
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            Settings(config_path=yaml_file("- just\n- a list\n"))

    def test_non_integer_booking_id_raises(self, monkeypatch):
        monkeypatch.setenv("BOOKER_NONEXISTENT_BOOKING_ID", "abc")

        with pytest.raises(ConfigurationError, match="nonexistent_booking_id"):
            Settings(config_path=MISSING_FILE)

    def test_blank_base_url_raises(self):
        with pytest.raises(ConfigurationError, match="Base URL"):
            Settings(config_path=MISSING_FILE, base_url="   ")

    def test_load_credentials(self):
        assert Settings(config_path=MISSING_FILE).load_credentials() == {
            "username": "admin",
            "password": "password123",
        }

    def test_setup_redaction_filter_attaches_to_logger_and_handlers(self):
        test_logger = logging.getLogger("booker_suite.tests.redaction")
        handler = logging.NullHandler()
        test_logger.addHandler(handler)
        try:
            settings = Settings(config_path=MISSING_FILE)
            redaction_filter = settings.setup_redaction_filter(test_logger)

            assert redaction_filter in test_logger.filters
            assert redaction_filter in handler.filters
            assert "password123" in redaction_filter.redacted_values
        finally:
            test_logger.removeHandler(handler)
            test_logger.filters.clear()


def test_live_tests_flag(monkeypatch):
    assert live_tests_enabled() is False
    monkeypatch.setenv("RUN_BOOKER_LIVE_TESTS", "1")
    assert live_tests_enabled() is True
