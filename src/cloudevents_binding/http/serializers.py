"""Binary and structured serializers, and the send invoker."""

from __future__ import annotations

import base64
import logging
from typing import Any

from ..codecs import DEFAULT_CODECS, CodecRegistry
from ..constants import DEFAULT_CE_CONTENT_TYPE, DEFAULT_CONTENT_TYPE, HEADER_CONTENT_TYPE
from ..event import CloudEvent
from ..headers import headers_for
from ..message import Message, Sender

logger = logging.getLogger(__name__)


def format_data(data: Any, content_type: str | None, codecs: CodecRegistry = DEFAULT_CODECS) -> str:
    """Format an event payload as a binary-mode body.

    Absent data gives an empty body; bytes are base64-encoded; anything else
    goes through the codec registered for the content type.

    Raises:
        ValidationError: UNSUPPORTED_CONTENT_TYPE when no codec is registered
    """
    if data is None:
        return ""
    codec = codecs.require_codec(content_type or DEFAULT_CONTENT_TYPE)
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(bytes(data)).decode("ascii")
    return codec.format(data)


def binary(event: CloudEvent, codecs: CodecRegistry = DEFAULT_CODECS) -> Message:
    """Serialize an event in binary content mode.

    Every attribute and extension becomes a header; the body carries only the
    formatted data.
    """
    headers = {HEADER_CONTENT_TYPE: DEFAULT_CONTENT_TYPE, **headers_for(event)}
    body = format_data(event.data, event.datacontenttype, codecs)
    return Message(headers=headers, body=body)


def structured(event: CloudEvent) -> Message:
    """Serialize an event in structured content mode.

    The single content-type header marks the body as a whole CloudEvent in
    JSON; attributes are not repeated as headers.
    """
    return Message(
        headers={HEADER_CONTENT_TYPE: DEFAULT_CE_CONTENT_TYPE},
        body=event.to_json(),
    )


async def invoke(sender: Sender, message: Message) -> Any:
    """Send a message by invoking the user-supplied sender.

    The sender's outcome is returned unchanged; this layer adds no retry,
    timeout, or validation.
    """
    logger.debug(f"Invoking sender with {len(message.headers)} headers")
    return await sender(message.headers, message.body)
