"""HTTP binding.

Converts CloudEvents to and from HTTP-shaped messages in binary or structured
content mode, and hands messages to a user-supplied sender.

Usage:
    message = HTTP.binary(event)
    ok = await HTTP.send(sender, message)
    event = HTTP.receive(Message(headers=request_headers, body=request_body))
"""

from ..message import Binding
from .receiver import ReceiveResult, is_structured, receive, try_receive, unwrap_base64
from .serializers import binary, format_data, invoke, structured

HTTP = Binding(
    binary=binary,
    structured=structured,
    send=invoke,
    receive=receive,
)

__all__ = [
    "HTTP",
    "ReceiveResult",
    "binary",
    "format_data",
    "invoke",
    "is_structured",
    "receive",
    "structured",
    "try_receive",
    "unwrap_base64",
]
