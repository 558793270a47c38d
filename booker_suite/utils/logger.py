"""
Structured logging for the booking suite.

Every entry is one JSON object per line. Session tokens never appear in
full: callers log ``mask_token(value)`` and the auth exchange is logged
without bodies.
"""

import inspect
import json
import logging
import time
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Optional


def mask_token(token: Optional[str]) -> str:
    """
    Mask a session token, keeping its first 4 characters.

    Example:
        >>> mask_token("abc123def456")
        "abc1********"
        >>> mask_token(None)
        "none"
    """
    if not token:
        return "none"
    if len(token) < 8:
        return "*" * len(token)
    return token[:4] + "*" * (len(token) - 4)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class StructuredLogger:
    """
    Thin JSON wrapper around a stdlib logger.

    The first instance created for a name attaches a stderr handler at DEBUG;
    later instances reuse it, so levels set by the CLI survive.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.DEBUG)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }
        optional = {
            "operation": operation or None,
            "context": context or None,
            "duration_ms": round(duration_ms, 2) if duration_ms is not None else None,
            "error": error or None,
        }
        entry.update({key: value for key, value in optional.items() if value is not None})
        return json.dumps(entry, ensure_ascii=False, default=str)

    def log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> None:
        level = level.upper()
        self.logger.log(
            getattr(logging, level, logging.DEBUG),
            self._format_log(level, message, operation, context, duration_ms, error),
        )

    def debug(self, message: str, **fields: Any) -> None:
        self.log("DEBUG", message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log("INFO", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log("WARNING", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log("ERROR", message, **fields)

    def http_exchange(
        self,
        message: str,
        response: Any,
        operation: Optional[str] = None,
        level: str = "DEBUG",
        body_limit: int = 500,
        include_bodies: bool = True,
    ) -> None:
        """
        Log one request/response pair.

        Method and URL come from ``response.request`` when present. Bodies are
        truncated to ``body_limit`` characters, or left out entirely when
        ``include_bodies`` is False (credentials, tokens).
        """
        request = getattr(response, "request", None)
        context: Dict[str, Any] = {
            "method": str(getattr(request, "method", "unknown")),
            "url": str(getattr(request, "url", getattr(response, "url", "unknown"))),
            "status_code": getattr(response, "status_code", None),
        }

        if include_bodies:
            context["response_body"] = str(getattr(response, "text", "") or "")[:body_limit]
            request_body = getattr(request, "body", None)
            if isinstance(request_body, bytes):
                request_body = request_body.decode("utf-8", errors="replace")
            if request_body:
                context["request_body"] = str(request_body)[:body_limit]

        self.log(level, message, operation=operation, context=context)


def log_operation(operation_name: str):
    """
    Log start, completion (with duration) and failure of a client call.

    The booking id and a masked token are picked out of the call's
    arguments, positional or keyword.
    """

    def decorator(func):
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            op_logger = get_logger(func.__module__)
            arguments = signature.bind_partial(*args, **kwargs).arguments

            context: Dict[str, Any] = {"function": func.__name__}
            if arguments.get("booking_id") is not None:
                context["booking_id"] = arguments["booking_id"]
            if "token" in arguments:
                token = arguments["token"]
                context["token_masked"] = mask_token(getattr(token, "value", token))

            op_logger.debug(f"Starting {operation_name}", operation=operation_name, context=context)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                op_logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=str(e),
                    duration_ms=_elapsed_ms(start),
                )
                raise

            op_logger.info(
                f"Completed {operation_name}",
                operation=operation_name,
                context=context,
                duration_ms=_elapsed_ms(start),
            )
            return result

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """Return a StructuredLogger for ``name`` (usually ``__name__``)."""
    return StructuredLogger(name)
