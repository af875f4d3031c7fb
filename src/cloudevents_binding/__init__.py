"""CloudEvents transport binding.

Converts CloudEvents to and from transport messages (headers + body) in binary
or structured content mode, for spec versions 1.0 and 0.3.

Key pieces:
- CloudEvent: the event model
- HTTP: the binding (binary, structured, send, receive)
- Message: headers and body as they travel on the wire
- ValidationError: every failure, tagged with an ErrorKind
"""

from .codecs import DEFAULT_CODECS, Codec, CodecRegistry
from .config import BindingConfig
from .constants import Mode, Version
from .emitter import Emitter, emit
from .errors import ErrorKind, ValidationError
from .event import CloudEvent, validate_cloudevent
from .http import HTTP, ReceiveResult, binary, invoke, receive, structured, try_receive
from .message import Binding, Headers, Message, Sender

__all__ = [
    "Binding",
    "BindingConfig",
    "CloudEvent",
    "Codec",
    "CodecRegistry",
    "DEFAULT_CODECS",
    "Emitter",
    "ErrorKind",
    "HTTP",
    "Headers",
    "Message",
    "Mode",
    "ReceiveResult",
    "Sender",
    "ValidationError",
    "Version",
    "binary",
    "emit",
    "invoke",
    "receive",
    "structured",
    "try_receive",
    "validate_cloudevent",
]
