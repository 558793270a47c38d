"""Configuration - endpoints, credentials and log redaction."""

from .settings import ConfigurationError, SecretRedactionFilter, Settings

__all__ = ["ConfigurationError", "SecretRedactionFilter", "Settings"]
