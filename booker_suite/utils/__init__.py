"""Shared utilities - structured logging."""

from .logger import StructuredLogger, get_logger, log_operation, mask_token

__all__ = ["StructuredLogger", "get_logger", "log_operation", "mask_token"]
