"""Specification constraint checks for CloudEvent instances."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any
from urllib.parse import urlsplit

from ..constants import ATTRIBUTES_BY_VERSION, ENCODING_BASE64, RESERVED_NAMES, Attribute, Version
from ..errors import ErrorKind, ValidationError
from .cloudevent import EXTENSION_VALUE_TYPES, CloudEvent

logger = logging.getLogger(__name__)

# 1.0 extension names: lower-case ASCII letters and digits
_V1_EXTENSION_NAME = re.compile(r"^[a-z0-9]+$")
# 0.3 names may also carry dashes, but not start with one
_V03_EXTENSION_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*$")

_REQUIRED = (Attribute.ID, Attribute.SOURCE, Attribute.TYPE, Attribute.SPEC_VERSION)
_NON_EMPTY_OPTIONAL = (Attribute.SUBJECT, Attribute.DATA_CONTENT_TYPE)


def _is_uri(value: str) -> bool:
    try:
        urlsplit(value)
    except ValueError:
        return False
    return bool(value.strip())


def _version_errors(event: CloudEvent, version: Version) -> list[str]:
    errors: list[str] = []
    defined = ATTRIBUTES_BY_VERSION[version]
    for attribute in Attribute:
        if attribute.value not in defined and event.get(attribute.value) is not None:
            errors.append(f"'{attribute.value}' is not an attribute of spec version {version.value}")

    schema_attr = Attribute.DATA_SCHEMA if version is Version.V1 else Attribute.SCHEMA_URL
    schema = event.get(schema_attr.value)
    if schema is not None and not _is_uri(schema):
        errors.append(f"'{schema_attr.value}' must be a URI")

    encoding = event.datacontentencoding
    if version is Version.V03 and encoding is not None and encoding != ENCODING_BASE64:
        errors.append(f"'datacontentencoding' must be '{ENCODING_BASE64}'")
    return errors


def _extension_errors(name: str, value: Any, version: Version) -> list[str]:
    errors: list[str] = []
    pattern = _V1_EXTENSION_NAME if version is Version.V1 else _V03_EXTENSION_NAME
    if not pattern.match(name):
        errors.append(f"invalid extension name '{name}'")
    if not isinstance(value, EXTENSION_VALUE_TYPES):
        errors.append(f"Invalid type of extension value: '{name}'")
    return errors


def validate_cloudevent(event: CloudEvent) -> bool:
    """Check an event against the constraints of its specification version.

    Args:
        event: Event to check

    Returns:
        True when the event is valid

    Raises:
        ValidationError: SPEC_CONSTRAINT listing every violation found, or
            RESERVED_NAME when an extension reuses a context attribute name
    """
    errors: list[str] = []

    for attribute in _REQUIRED:
        value = getattr(event, attribute.value)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(f"'{attribute.value}' is required and must be a non-empty string")

    for attribute in _NON_EMPTY_OPTIONAL:
        value = getattr(event, attribute.value)
        if value is not None and not value.strip():
            errors.append(f"'{attribute.value}' must be a non-empty string when present")

    if event.time is not None and not isinstance(event.time, datetime):
        errors.append("'time' must be an RFC 3339 timestamp")

    version = Version.parse(event.specversion)
    errors.extend(_version_errors(event, version))

    reserved = [name for name in event.extensions if name in RESERVED_NAMES]
    if reserved:
        raise ValidationError(
            f"Reserved attribute name: '{reserved[0]}'", ErrorKind.RESERVED_NAME, reserved
        )
    for name, value in event.extensions.items():
        errors.extend(_extension_errors(name, value, version))

    if errors:
        logger.debug(f"CloudEvent {event.id!r} failed validation: {errors}")
        raise ValidationError("invalid payload", ErrorKind.SPEC_CONSTRAINT, errors)
    return True
