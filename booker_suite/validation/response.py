"""
Response expectations.

Each helper checks one aspect of a response (status set, field values at
dotted paths, raw-body substring, JSON schema). On mismatch the request and
response are logged and ResponseValidationError is raised. It subclasses
AssertionError so pytest reports it as an ordinary test failure and the
lifecycle runner records it as a failed step.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import jsonschema

from booker_suite.utils.logger import get_logger

logger = get_logger(__name__)


class _Sentinel:
    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return self.name


# Path not present in the body
MISSING = _Sentinel("MISSING")
# Expectation: value present and not null
NOT_NULL = _Sentinel("NOT_NULL")


class ResponseValidationError(AssertionError):
    """A response did not match an expectation."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _describe(response: Any) -> str:
    request = getattr(response, "request", None)
    method = getattr(request, "method", None)
    url = getattr(request, "url", None) or getattr(response, "url", None)
    if method and url:
        return f"{method} {url}"
    return "response"


def _fail(response: Any, message: str) -> None:
    logger.http_exchange(message, response, operation="validation", level="ERROR")
    raise ResponseValidationError(
        f"{_describe(response)}: {message}",
        status_code=getattr(response, "status_code", None),
    )


def json_body(response: Any) -> Any:
    """Parse the response body, failing the expectation if it is not JSON."""
    try:
        return response.json()
    except ValueError as e:
        _fail(response, f"response body is not JSON ({e})")


def expect_status(response: Any, *allowed: int) -> Any:
    """
    Assert the status code is one of ``allowed``.

    Returns:
        The response, for chaining
    """
    if not allowed:
        raise ValueError("expect_status needs at least one status code")
    status = getattr(response, "status_code", None)
    if status not in allowed:
        expected = allowed[0] if len(allowed) == 1 else f"one of {sorted(allowed)}"
        _fail(response, f"expected status {expected}, got {status}")
    return response


def extract_path(body: Any, path: str) -> Any:
    """
    Read a dotted path ("booking.bookingdates.checkin") from a JSON body.

    Integer segments index into lists. Returns MISSING if any segment is absent.
    """
    current = body
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def _matches(actual: Any, expected: Any) -> bool:
    if expected is NOT_NULL:
        return actual is not MISSING and actual is not None
    if actual is MISSING:
        return False
    # bool is an int subclass; True must not equal 1 here
    if isinstance(expected, bool) or isinstance(actual, bool):
        return type(actual) is type(expected) and actual == expected
    return actual == expected


def expect_fields(response: Any, expected: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Assert every dotted path in ``expected`` holds the expected value.

    Numbers compare by value, so 150 matches 150.0. Use NOT_NULL to only
    require presence.

    Returns:
        Mapping of path to the actual value found
    """
    body = json_body(response)
    actual_values: Dict[str, Any] = {}
    mismatches = []
    for path, want in expected.items():
        got = extract_path(body, path)
        actual_values[path] = got
        if not _matches(got, want):
            mismatches.append(f"{path}: expected {want!r}, got {got!r}")

    if mismatches:
        _fail(response, "field mismatch - " + "; ".join(mismatches))
    return actual_values


def expect_body_excludes(response: Any, text: str) -> None:
    """Assert ``text`` does not occur anywhere in the raw response body."""
    body = getattr(response, "text", "") or ""
    if text in body:
        _fail(response, f"response body unexpectedly contains {text!r}")


def expect_schema(response: Any, schema: Dict[str, Any]) -> Any:
    """
    Assert the JSON body validates against ``schema``.

    Returns:
        The parsed body
    """
    body = json_body(response)
    try:
        jsonschema.validate(instance=body, schema=schema)
    except jsonschema.ValidationError as e:
        location = ".".join(str(p) for p in e.absolute_path) or "<root>"
        _fail(response, f"schema violation at {location}: {e.message}")
    return body
