"""Errors raised by the binding.

Every failure is a ValidationError tagged with an ErrorKind, so transport
integrations can map kinds to status codes without parsing messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Categories of binding failures."""

    MISSING_HEADERS = "missing_headers"
    INVALID_BODY_SHAPE = "invalid_body_shape"
    UNSUPPORTED_SPEC_VERSION = "unsupported_spec_version"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    SPEC_CONSTRAINT = "spec_constraint"
    RESERVED_NAME = "reserved_name"
    INVALID_PAYLOAD = "invalid_payload"


class ValidationError(Exception):
    """A message or event does not conform to the CloudEvents specification.

    Attributes:
        kind: Category of the failure
        errors: Individual constraint violations, when more than one was found
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.SPEC_CONSTRAINT,
        errors: list[str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(self.errors)}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable error document."""
        data: dict[str, Any] = {"error": self.message, "kind": self.kind.value}
        if self.errors:
            data["details"] = list(self.errors)
        return data


def missing_headers() -> ValidationError:
    return ValidationError("headers is null or undefined", ErrorKind.MISSING_HEADERS)


def invalid_body_shape(body: Any) -> ValidationError:
    return ValidationError(
        f"payload must be an object or a string, got {type(body).__name__}",
        ErrorKind.INVALID_BODY_SHAPE,
    )


def unsupported_spec_version(value: Any) -> ValidationError:
    return ValidationError(f"invalid spec version {value}", ErrorKind.UNSUPPORTED_SPEC_VERSION)


def unsupported_content_type(content_type: str | None) -> ValidationError:
    return ValidationError(
        f"no parser found for content type {content_type}",
        ErrorKind.UNSUPPORTED_CONTENT_TYPE,
    )


def reserved_name(name: str) -> ValidationError:
    return ValidationError(f"Reserved attribute name: '{name}'", ErrorKind.RESERVED_NAME)
