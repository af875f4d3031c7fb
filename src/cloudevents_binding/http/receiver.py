"""Receiver: reconstructs a validated CloudEvent from an incoming Message.

Binary-mode messages go through a fixed pipeline; every step is a gate for the
next one:

1. headers must be present
2. a body, if any, must be a string or a JSON object
3. a declared ``ce-specversion`` must be a known version; it is read from a
   working copy of the headers with normalized names, which steps 6-8 share
4. a base64-wrapped string body is unwrapped, exactly once
5. the working copy, not the message, is consumed by the steps below
6. headers in the version's table become attributes and leave the copy
7. the body is parsed by the codec of the resolved ``datacontenttype``
8. remaining ``ce-`` headers become extensions, other headers are ignored
9. ``datacontentencoding: base64`` is dropped for JSON data (already decoded)
10. the event is constructed and validated

Messages whose content type is ``application/cloudevents+json`` carry the
whole event in the body (structured mode) and are parsed as one document
after step 3.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import pydantic

from ..codecs import DEFAULT_CODECS, CodecRegistry, media_type
from ..constants import (
    CHARSET_DEFAULT,
    ENCODING_BASE64,
    EXTENSIONS_PREFIX,
    HEADER_CONTENT_TYPE,
    MIME_CE,
    MIME_JSON,
    Attribute,
    CEHeader,
    Version,
)
from ..errors import (
    ErrorKind,
    ValidationError,
    invalid_body_shape,
    missing_headers,
    unsupported_spec_version,
)
from ..event import CloudEvent, validate_cloudevent
from ..headers import sanitize, table_for
from ..message import Message

logger = logging.getLogger(__name__)

_BASE64 = re.compile(r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$")


@dataclass(frozen=True)
class ReceiveResult:
    """Outcome of ``try_receive``: exactly one of event/error is set."""

    event: CloudEvent | None = None
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> CloudEvent:
        """Return the event, raising the captured error if there is none."""
        if self.error is not None:
            raise self.error
        if self.event is None:
            raise ValidationError("no event received", ErrorKind.INVALID_PAYLOAD)
        return self.event


def _find_header(headers: Mapping[str, Any], name: str) -> Any:
    """Case-insensitive header lookup without copying the mapping."""
    for key, value in headers.items():
        if str(key).strip().lower() == name:
            return value
    return None


def _resolve_version(declared: Any) -> Version:
    try:
        return Version.parse(declared)
    except ValueError as e:
        raise unsupported_spec_version(declared) from e


def is_base64(value: str) -> bool:
    """Check whether a string is strictly valid, padded base64."""
    return bool(value) and len(value) % 4 == 0 and _BASE64.match(value) is not None


def unwrap_base64(body: Any) -> Any:
    """Undo the base64 wrapping of a binary-mode body.

    Only strings that are valid base64 AND decode to UTF-8 text are unwrapped;
    the decoded bytes are returned for the codec to parse. Anything else is
    returned unchanged, so a string body is never decoded twice.
    """
    if not isinstance(body, str) or not is_base64(body):
        return body
    try:
        decoded = base64.b64decode(body, validate=True)
        decoded.decode(CHARSET_DEFAULT)
    except (binascii.Error, UnicodeDecodeError):
        return body
    logger.debug(f"Unwrapped base64 body ({len(body)} -> {len(decoded)} bytes)")
    return decoded


def is_structured(headers: Mapping[str, Any]) -> bool:
    """Check whether a message carries a structured-mode CloudEvent."""
    mime = media_type(_find_header(headers, HEADER_CONTENT_TYPE))
    return bool(mime) and mime.startswith(MIME_CE)


def _construct(factory: Callable[..., CloudEvent], *args: Any, **kwargs: Any) -> CloudEvent:
    """Build an event, surfacing model errors as spec constraint violations."""
    try:
        event = factory(*args, **kwargs)
    except pydantic.ValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in err['loc']) or 'event'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValidationError("invalid payload", ErrorKind.SPEC_CONSTRAINT, errors) from e
    validate_cloudevent(event)
    return event


def _receive_structured(
    headers: Mapping[str, Any],
    body: Any,
    codecs: CodecRegistry,
) -> CloudEvent:
    if body is None or body == "":
        raise ValidationError("structured message has no body", ErrorKind.INVALID_PAYLOAD)
    codec = codecs.require_codec(_find_header(headers, HEADER_CONTENT_TYPE))
    document = codec.parse(body)
    if not isinstance(document, Mapping):
        raise ValidationError(
            "structured body must be a JSON object", ErrorKind.INVALID_PAYLOAD
        )
    declared = document.get(Attribute.SPEC_VERSION.value)
    if declared is not None:
        _resolve_version(declared)
    logger.debug(f"Received structured CloudEvent {document.get(Attribute.ID.value)!r}")
    return _construct(CloudEvent.from_dict, document)


def receive(
    message: Message,
    version: Version | str | None = None,
    codecs: CodecRegistry = DEFAULT_CODECS,
) -> CloudEvent:
    """Parse an incoming message into a validated CloudEvent.

    Args:
        message: The incoming message
        version: Spec version whose header table to use; defaults to the
            message's declared ``ce-specversion``, else the latest version
        codecs: Codec registry used to parse the body

    Returns:
        A new CloudEvent; the message is not modified

    Raises:
        ValidationError: if the message does not carry a valid CloudEvent
    """
    headers = message.headers
    body = message.body

    if headers is None:
        raise missing_headers()
    if body is not None and not isinstance(body, (str, Mapping)):
        raise invalid_body_shape(body)

    # every later step reads this copy, so duplicate names resolve the same way
    working = sanitize(headers)

    declared = working.get(CEHeader.SPEC_VERSION.value)
    if declared:
        declared = _resolve_version(declared)

    if is_structured(working):
        return _receive_structured(working, body, codecs)

    body = unwrap_base64(body)

    active = _resolve_version(version) if version is not None else (declared or Version.latest())
    attributes: dict[str, Any] = {}
    for mapping in table_for(active):
        if mapping.header not in working:
            continue
        raw = working.pop(mapping.header)
        try:
            attributes[mapping.attribute] = mapping.parse(raw)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"invalid value for header {mapping.header}: {raw!r}", ErrorKind.SPEC_CONSTRAINT
            ) from e

    data = None
    if body is not None and body != "" and body != b"":
        codec = codecs.require_codec(attributes.get(Attribute.DATA_CONTENT_TYPE.value))
        data = codec.parse(body)

    extensions: dict[str, Any] = {}
    for name, value in working.items():
        if name.startswith(EXTENSIONS_PREFIX):
            extensions[name[len(EXTENSIONS_PREFIX) :]] = value
        else:
            logger.debug(f"Ignoring non-CloudEvents header {name!r}")

    if (
        media_type(attributes.get(Attribute.DATA_CONTENT_TYPE.value)) == MIME_JSON
        and attributes.get(Attribute.DATA_CONTENT_ENCODING.value) == ENCODING_BASE64
    ):
        del attributes[Attribute.DATA_CONTENT_ENCODING.value]

    return _construct(CloudEvent.create, extensions=extensions, data=data, **attributes)


def try_receive(
    message: Message,
    version: Version | str | None = None,
    codecs: CodecRegistry = DEFAULT_CODECS,
) -> ReceiveResult:
    """Like ``receive``, but report failure as a value instead of raising."""
    try:
        return ReceiveResult(event=receive(message, version, codecs))
    except ValidationError as e:
        return ReceiveResult(error=e)
