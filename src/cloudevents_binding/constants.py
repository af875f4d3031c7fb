"""Wire-level constants shared by the serializers and the receiver."""

from __future__ import annotations

from enum import Enum


class Version(str, Enum):
    """Supported CloudEvents specification versions."""

    V1 = "1.0"
    V03 = "0.3"

    @classmethod
    def latest(cls) -> Version:
        return cls.V1

    @classmethod
    def parse(cls, value: str | Version) -> Version:
        """Resolve a version identifier, raising ValueError when unknown."""
        if isinstance(value, Version):
            return value
        return cls(str(value).strip())


class Mode(str, Enum):
    """Content modes of the HTTP binding."""

    BINARY = "binary"
    STRUCTURED = "structured"


# MIME types
MIME_JSON = "application/json"
MIME_CE = "application/cloudevents"
MIME_CE_JSON = "application/cloudevents+json"
MIME_OCTET_STREAM = "application/octet-stream"
MIME_TEXT = "text/plain"

CHARSET_DEFAULT = "utf-8"
DEFAULT_CONTENT_TYPE = f"{MIME_JSON}; charset={CHARSET_DEFAULT}"
DEFAULT_CE_CONTENT_TYPE = f"{MIME_CE_JSON}; charset={CHARSET_DEFAULT}"

ENCODING_BASE64 = "base64"

# Headers
HEADER_CONTENT_TYPE = "content-type"
EXTENSIONS_PREFIX = "ce-"


class CEHeader(str, Enum):
    """Binary-mode header names."""

    ID = "ce-id"
    TYPE = "ce-type"
    SOURCE = "ce-source"
    SPEC_VERSION = "ce-specversion"
    TIME = "ce-time"
    SUBJECT = "ce-subject"
    DATA_SCHEMA = "ce-dataschema"  # 1.0
    SCHEMA_URL = "ce-schemaurl"  # 0.3
    CONTENT_ENCODING = "ce-datacontentencoding"  # 0.3


class Attribute(str, Enum):
    """Canonical context attribute names."""

    ID = "id"
    TYPE = "type"
    SOURCE = "source"
    SPEC_VERSION = "specversion"
    TIME = "time"
    SUBJECT = "subject"
    DATA_CONTENT_TYPE = "datacontenttype"
    DATA_SCHEMA = "dataschema"
    SCHEMA_URL = "schemaurl"
    DATA_CONTENT_ENCODING = "datacontentencoding"


# Structured-mode members that carry the payload rather than an attribute
DATA = "data"
DATA_BASE64 = "data_base64"

RESERVED_NAMES: frozenset[str] = frozenset(
    {attribute.value for attribute in Attribute} | {DATA, DATA_BASE64}
)

# Attributes each version defines; anything else on an event is an extension
ATTRIBUTES_BY_VERSION: dict[Version, frozenset[str]] = {
    Version.V1: frozenset(
        {
            Attribute.ID.value,
            Attribute.TYPE.value,
            Attribute.SOURCE.value,
            Attribute.SPEC_VERSION.value,
            Attribute.TIME.value,
            Attribute.SUBJECT.value,
            Attribute.DATA_CONTENT_TYPE.value,
            Attribute.DATA_SCHEMA.value,
        }
    ),
    Version.V03: frozenset(
        {
            Attribute.ID.value,
            Attribute.TYPE.value,
            Attribute.SOURCE.value,
            Attribute.SPEC_VERSION.value,
            Attribute.TIME.value,
            Attribute.SUBJECT.value,
            Attribute.DATA_CONTENT_TYPE.value,
            Attribute.SCHEMA_URL.value,
            Attribute.DATA_CONTENT_ENCODING.value,
        }
    ),
}
