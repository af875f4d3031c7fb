"""CloudEvent model.

The event is an immutable pydantic model. Context attributes are declared
fields; extensions are pydantic extra fields, so ``CloudEvent(..., foo="bar")``
carries an extension named ``foo``.

Structured-mode JSON is produced by ``to_dict()``/``to_json()`` and read back
by ``from_dict()``. Binary payloads travel as ``data_base64``.

Example:
    event = CloudEvent(
        type="org.cncf.cloudevents.example",
        source="urn:event:from:myapi/resource/123",
        datacontenttype="application/json",
        data={"foo": "bar"},
        extension1="foobar",
    )
"""

from __future__ import annotations

import base64
import binascii
import json
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..codecs import is_json_content_type
from ..constants import (
    DATA,
    DATA_BASE64,
    ENCODING_BASE64,
    RESERVED_NAMES,
    Attribute,
    Version,
)
from ..errors import ErrorKind, ValidationError, reserved_name

# Extension values must be scalars the wire format can carry as strings
EXTENSION_VALUE_TYPES = (str, bool, int, datetime, bytes)

# Names pydantic keeps for itself; they cannot be extra fields
_MODEL_NAMESPACES = ("_", "model_")


def format_time(value: datetime) -> str:
    """Format a timestamp as RFC 3339 with a 'Z' suffix for UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat().replace("+00:00", "Z")


def parse_time(value: str | datetime) -> datetime:
    """Parse an RFC 3339 timestamp. Naive values are taken as UTC."""
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_extension_value(value: Any) -> str:
    """Render an extension value as its canonical string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


class CloudEvent(BaseModel):
    """A CloudEvent: context attributes, extensions, and an optional payload.

    Attributes declared here are the union of the 1.0 and 0.3 attribute sets;
    which of them an event may carry is checked by ``validate_cloudevent``.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    source: str
    type: str
    specversion: Version = Version.V1
    time: datetime | None = None
    subject: str | None = None
    datacontenttype: str | None = None
    dataschema: str | None = None  # 1.0
    schemaurl: str | None = None  # 0.3
    datacontentencoding: str | None = None  # 0.3
    data: Any = None

    @model_validator(mode="before")
    @classmethod
    def _parse_json_data(cls, values: Any) -> Any:
        """Turn stringified JSON data into its value when the content type is JSON."""
        if not isinstance(values, Mapping):
            return values
        data = values.get(DATA)
        if isinstance(data, str) and is_json_content_type(values.get("datacontenttype")):
            try:
                parsed = json.loads(data)
            except json.JSONDecodeError:
                return values
            return {**values, DATA: parsed}
        return values

    @field_validator("time", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> Any:
        if value is None or not isinstance(value, (str, datetime)):
            return value
        try:
            return parse_time(value)
        except ValueError:
            # let pydantic report the type error
            return value

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def extensions(self) -> dict[str, Any]:
        """Extension attributes, keyed by name."""
        return dict(self.model_extra or {})

    @property
    def attributes(self) -> dict[str, Any]:
        """Context attributes that are set (None values omitted)."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if name != DATA and getattr(self, name) is not None
        }

    def get(self, name: str, default: Any = None) -> Any:
        """Get an attribute or extension by name."""
        if name in type(self).model_fields:
            value = getattr(self, name)
            return default if value is None else value
        return self.extensions.get(name, default)

    # =========================================================================
    # Copies
    # =========================================================================

    def evolve(self, **changes: Any) -> CloudEvent:
        """Return a new event with the given attributes replaced."""
        values = {**self.attributes, **self.extensions, DATA: self.data}
        values.update(changes)
        return type(self)(**values)

    def with_extension(self, name: str, value: Any) -> CloudEvent:
        """Return a new event carrying one more extension.

        Raises:
            ValidationError: RESERVED_NAME for a context attribute name,
                SPEC_CONSTRAINT for a non-scalar value
        """
        check_extension(name, value)
        return self.evolve(**{name: value})

    @classmethod
    def create(
        cls,
        *,
        extensions: Mapping[str, Any] | None = None,
        **attributes: Any,
    ) -> CloudEvent:
        """Create an event, validating extension names and values first."""
        for name, value in (extensions or {}).items():
            check_extension(name, value)
        return cls(**attributes, **dict(extensions or {}))

    # =========================================================================
    # Structured-mode JSON
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert to the structured-mode JSON object."""
        doc: dict[str, Any] = {}
        for name, value in self.attributes.items():
            if isinstance(value, datetime):
                doc[name] = format_time(value)
            elif isinstance(value, Version):
                doc[name] = value.value
            else:
                doc[name] = value
        for name, value in self.extensions.items():
            doc[name] = value if isinstance(value, (str, bool, int)) else format_extension_value(value)
        if isinstance(self.data, (bytes, bytearray)):
            doc[DATA_BASE64] = base64.b64encode(bytes(self.data)).decode("ascii")
        elif self.data is not None:
            doc[DATA] = self.data
        return doc

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    def __str__(self) -> str:
        return self.to_json()

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> CloudEvent:
        """Create an event from a structured-mode JSON object.

        Members that are not attributes of any supported version become
        extensions. ``data_base64`` is decoded to bytes. A 0.3 JSON document
        with ``datacontentencoding: base64`` has its data decoded and parsed,
        and loses the encoding marker; other content types keep their data
        exactly as sent.

        Raises:
            ValidationError: INVALID_PAYLOAD when base64 data cannot be decoded
        """
        values = dict(document)
        if DATA_BASE64 in values:
            values[DATA] = _b64decode(values.pop(DATA_BASE64))

        encoding = values.get(Attribute.DATA_CONTENT_ENCODING.value)
        if (
            encoding == ENCODING_BASE64
            and isinstance(values.get(DATA), str)
            and is_json_content_type(values.get(Attribute.DATA_CONTENT_TYPE.value))
        ):
            decoded = _b64decode(values[DATA])
            # Decoded and parsed: the "still encoded" marker no longer holds
            try:
                values[DATA] = decoded.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ValidationError(
                    "base64 JSON data is not UTF-8", ErrorKind.INVALID_PAYLOAD
                ) from e
            del values[Attribute.DATA_CONTENT_ENCODING.value]

        for name in values:
            if name not in cls.model_fields and name.startswith(_MODEL_NAMESPACES):
                raise ValidationError(
                    f"invalid extension name '{name}'", ErrorKind.SPEC_CONSTRAINT
                )
        return cls(**values)


def _b64decode(value: Any) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise ValidationError("invalid base64 data", ErrorKind.INVALID_PAYLOAD) from e


def check_extension(name: str, value: Any) -> None:
    """Reject reserved extension names and non-scalar extension values."""
    if name in RESERVED_NAMES:
        raise reserved_name(name)
    if name.startswith(_MODEL_NAMESPACES):
        raise ValidationError(f"invalid extension name '{name}'", ErrorKind.SPEC_CONSTRAINT)
    if not isinstance(value, EXTENSION_VALUE_TYPES):
        raise ValidationError(
            f"Invalid type of extension value: {name}={type(value).__name__}",
            ErrorKind.SPEC_CONSTRAINT,
        )
