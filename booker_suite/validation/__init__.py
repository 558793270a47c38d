"""Validation module - response expectations and shape schemas."""

from .response import (
    MISSING,
    NOT_NULL,
    ResponseValidationError,
    expect_body_excludes,
    expect_fields,
    expect_schema,
    expect_status,
    extract_path,
    json_body,
)

__all__ = [
    "MISSING",
    "NOT_NULL",
    "ResponseValidationError",
    "expect_body_excludes",
    "expect_fields",
    "expect_schema",
    "expect_status",
    "extract_path",
    "json_body",
]
