"""Content codec registry.

Maps a media type to the pair of functions that turn an event's data payload
into a wire string and back. Lookups are exact on the media type (parameters
such as ``charset`` are stripped first); a missing codec is always an error
for callers that need one, never a silent default.

The registry is immutable. ``extend()`` returns a new registry, so custom
codecs are layered on without touching the process-wide default.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .constants import CHARSET_DEFAULT, MIME_CE_JSON, MIME_JSON, MIME_OCTET_STREAM, MIME_TEXT
from .errors import ErrorKind, ValidationError, unsupported_content_type

logger = logging.getLogger(__name__)

Parser = Callable[[Any], Any]
Formatter = Callable[[Any], str]


def media_type(content_type: str | None) -> str | None:
    """Strip parameters from a content type ("application/json; charset=utf-8")."""
    if content_type is None:
        return None
    return content_type.split(";", 1)[0].strip()


def is_json_content_type(content_type: str | None) -> bool:
    """Check whether a content type carries JSON (application/json or +json)."""
    mime = media_type(content_type)
    if not mime:
        return False
    return mime == MIME_JSON or mime.endswith("+json")


# =============================================================================
# Parsers and formatters
# =============================================================================


def parse_json(value: Any) -> Any:
    """Parse a JSON payload; already-structured values pass through."""
    if not isinstance(value, (str, bytes, bytearray)):
        return value
    try:
        return json.loads(value)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"invalid JSON payload: {e}", ErrorKind.INVALID_PAYLOAD) from e


def format_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def parse_text(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode(CHARSET_DEFAULT)
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"payload is not valid {CHARSET_DEFAULT} text", ErrorKind.INVALID_PAYLOAD
            ) from e
    return value


def format_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def parse_binary(value: Any) -> Any:
    """Parse an octet-stream payload into bytes.

    Bytes arrive here when the receiver already removed the base64 wrapping.
    A string is either a body that was never wrapped, or a wrapped body whose
    content is not UTF-8 text, which the receiver leaves for this codec.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            return value.encode(CHARSET_DEFAULT)
    return value


def format_binary(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return format_text(value)


# =============================================================================
# Registry
# =============================================================================


@dataclass(frozen=True)
class Codec:
    """Parser/formatter pair bound to one media type."""

    content_type: str
    parse: Parser
    format: Formatter


class CodecRegistry:
    """Read-only lookup table from media type to Codec."""

    def __init__(self, codecs: Iterable[Codec] = ()):
        self._codecs: Mapping[str, Codec] = MappingProxyType(
            {codec.content_type: codec for codec in codecs}
        )

    def __contains__(self, content_type: object) -> bool:
        return isinstance(content_type, str) and self.codec_for(content_type) is not None

    def __len__(self) -> int:
        return len(self._codecs)

    @property
    def content_types(self) -> list[str]:
        return sorted(self._codecs)

    def codec_for(self, content_type: str | None) -> Codec | None:
        """Find the codec for a content type, or None when none is registered."""
        mime = media_type(content_type)
        if not mime:
            return None
        return self._codecs.get(mime)

    def require_codec(self, content_type: str | None) -> Codec:
        """Find the codec for a content type.

        Raises:
            ValidationError: UNSUPPORTED_CONTENT_TYPE when none is registered
        """
        codec = self.codec_for(content_type)
        if codec is None:
            raise unsupported_content_type(content_type)
        return codec

    def extend(self, *codecs: Codec) -> CodecRegistry:
        """Return a new registry with additional (or replacing) codecs."""
        merged = dict(self._codecs)
        for codec in codecs:
            merged[codec.content_type] = codec
        logger.debug(f"Extended codec registry with {[c.content_type for c in codecs]}")
        return CodecRegistry(merged.values())


def json_codec(content_type: str) -> Codec:
    return Codec(content_type, parse_json, format_json)


def text_codec(content_type: str) -> Codec:
    return Codec(content_type, parse_text, format_text)


DEFAULT_CODECS = CodecRegistry(
    [
        json_codec(MIME_JSON),
        json_codec(MIME_CE_JSON),
        text_codec(MIME_TEXT),
        text_codec("text/html"),
        text_codec("text/xml"),
        text_codec("application/xml"),
        Codec(MIME_OCTET_STREAM, parse_binary, format_binary),
    ]
)


def codec_for(content_type: str | None) -> Codec | None:
    """Look up a codec in the default registry."""
    return DEFAULT_CODECS.codec_for(content_type)
