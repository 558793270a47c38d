"""
Configuration loader for the Restful Booker suite

Resolves the target base URL, endpoint paths and credentials from built-in
defaults, an optional YAML file and environment variables, and provides a
logging filter that redacts credentials and tokens.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


DEFAULT_BASE_URL = "https://restful-booker.herokuapp.com"
BOOKING_PATH = "/booking"
AUTH_PATH = "/auth"
PING_PATH = "/ping"

# Public demo credentials published by the service itself
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "password123"  # nosec B105

# Identifier assumed never to exist on the remote service
DEFAULT_NONEXISTENT_BOOKING_ID = 99999999

DEFAULT_CONFIG_FILE = "config/booker.yaml"

# Live suite opt-in flag
RUN_LIVE_TESTS_ENV = "RUN_BOOKER_LIVE_TESTS"

_ENV_OVERRIDES = {
    "base_url": "BOOKER_BASE_URL",
    "username": "BOOKER_USERNAME",
    "password": "BOOKER_PASSWORD",
    "nonexistent_booking_id": "BOOKER_NONEXISTENT_BOOKING_ID",
}


def live_tests_enabled() -> bool:
    """Return True when the live suite was explicitly enabled."""
    return os.getenv(RUN_LIVE_TESTS_ENV) == "1"


class SecretRedactionFilter(logging.Filter):
    """
    Logging filter that redacts secret values from log records.
    Replaces secret substrings with ***REDACTED*** to prevent accidental leakage.
    """

    def __init__(self, secrets: Optional[Dict[str, Any]] = None):
        """
        Initialize filter with secrets to redact.

        Args:
            secrets: Dictionary of secrets to redact (values will be masked)
        """
        super().__init__()
        self.secrets = secrets or {}
        self.redacted_values: set[str] = set()
        if self.secrets:
            self._extract_secret_values(self.secrets)

    def _extract_secret_values(self, obj: Any, max_depth: int = 5) -> None:
        """Recursively extract all secret values from nested structures."""
        if max_depth <= 0:
            return

        if isinstance(obj, dict):
            for value in obj.values():
                self._extract_secret_values(value, max_depth - 1)
        elif isinstance(obj, (list, tuple)):
            for item in obj:
                self._extract_secret_values(item, max_depth - 1)
        elif isinstance(obj, str) and obj and len(obj) > 3:
            self.redacted_values.add(obj)

    def add_secret(self, value: Optional[str]) -> None:
        """Register an additional value (e.g. a token obtained at runtime)."""
        self._extract_secret_values(value)

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter and redact log record."""
        record.msg = self._redact_string(str(record.msg))
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._redact_string(str(v)) for k, v in record.args.items()}
            elif isinstance(record.args, (list, tuple)):
                record.args = tuple(self._redact_string(str(arg)) for arg in record.args)
        return True

    def _redact_string(self, text: str) -> str:
        """Redact all secret values from string."""
        # Longest first so a secret that contains another is fully replaced
        for secret in sorted(self.redacted_values, key=len, reverse=True):
            if secret in text:
                text = text.replace(secret, "***REDACTED***")
        return text


class Settings:
    """
    Suite configuration.

    Priority (lowest to highest): defaults, YAML file, environment variables.
    """

    def __init__(self, config_path: Optional[str] = None, **overrides: Any):
        """
        Initialize Settings.

        Args:
            config_path: Path to a YAML file (default: BOOKER_CONFIG_FILE or
                config/booker.yaml). A missing file is ignored.
            **overrides: Explicit values that win over every other source
                (base_url, username, password, nonexistent_booking_id)

        Raises:
            ConfigurationError: If the YAML file is malformed or a value is invalid
        """
        self.config_path = config_path or os.getenv("BOOKER_CONFIG_FILE", DEFAULT_CONFIG_FILE)

        values: Dict[str, Any] = {
            "base_url": DEFAULT_BASE_URL,
            "username": DEFAULT_USERNAME,
            "password": DEFAULT_PASSWORD,
            "nonexistent_booking_id": DEFAULT_NONEXISTENT_BOOKING_ID,
        }
        values.update(self._load_from_file(self.config_path))

        for key, env_name in _ENV_OVERRIDES.items():
            env_value = os.getenv(env_name)
            if env_value:
                values[key] = env_value

        values.update({k: v for k, v in overrides.items() if v is not None})

        base_url = str(values["base_url"] or "").strip()
        if not base_url:
            raise ConfigurationError("Base URL must not be empty")
        self.base_url = base_url.rstrip("/")
        self.username = str(values["username"])
        self.password = str(values["password"])

        try:
            self.nonexistent_booking_id = int(values["nonexistent_booking_id"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"nonexistent_booking_id must be an integer, got {values['nonexistent_booking_id']!r}"
            ) from e

        self.booking_path = BOOKING_PATH
        self.auth_path = AUTH_PATH
        self.ping_path = PING_PATH

    @staticmethod
    def _load_from_file(filepath: str) -> Dict[str, Any]:
        """
        Load settings from a YAML file.

        Returns:
            Mapping of known keys found in the file (empty if file is absent)

        Raises:
            ConfigurationError: If the file cannot be parsed or is not a mapping
        """
        if not filepath or not os.path.exists(filepath):
            return {}

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {filepath}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {filepath}: {e}") from e

        if content is None:
            logger.warning(f"Empty configuration file: {filepath}")
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(
                f"Configuration file {filepath} must contain a mapping, got {type(content).__name__}"
            )

        unknown = set(content) - set(_ENV_OVERRIDES)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys in {filepath}: {sorted(unknown)}")

        logger.debug(f"Loaded configuration from {filepath}")
        return {k: v for k, v in content.items() if k in _ENV_OVERRIDES}

    @property
    def auth_url(self) -> str:
        return f"{self.base_url}{self.auth_path}"

    @property
    def ping_url(self) -> str:
        return f"{self.base_url}{self.ping_path}"

    def booking_url(self, booking_id: Optional[int] = None) -> str:
        """Collection URL, or the item URL when booking_id is given."""
        if booking_id is None:
            return f"{self.base_url}{self.booking_path}"
        return f"{self.base_url}{self.booking_path}/{booking_id}"

    def load_credentials(self) -> Dict[str, str]:
        """Return the auth endpoint request body."""
        return {"username": self.username, "password": self.password}

    def setup_redaction_filter(
        self,
        logger_instance: logging.Logger,
        redaction_filter: Optional[SecretRedactionFilter] = None,
    ) -> SecretRedactionFilter:
        """
        Attach a SecretRedactionFilter carrying the configured password.

        The filter goes on the logger and on each of its handlers. Tokens
        obtained later can be registered with ``add_secret``.

        Args:
            logger_instance: Logger instance to configure
            redaction_filter: Existing filter to reuse (one is created if None)

        Returns:
            The installed filter
        """
        if redaction_filter is None:
            redaction_filter = SecretRedactionFilter({"password": self.password})
        logger_instance.addFilter(redaction_filter)
        for handler in logger_instance.handlers:
            handler.addFilter(redaction_filter)
        return redaction_filter
