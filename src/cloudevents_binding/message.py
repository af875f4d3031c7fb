"""Transport-agnostic message types.

A Message is the only wire-level value the binding exchanges with the outside
world: a flat string-to-string header mapping plus a body. Serializers produce
messages, the receiver consumes them, and a caller-supplied Sender puts them on
the wire.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .constants import Version
    from .event import CloudEvent

Headers = dict[str, str]


@dataclass(frozen=True)
class Message:
    """A CloudEvent as headers and body.

    Attributes:
        headers: Header names to values; names are case-insensitive on receipt
        body: Wire body; a string, or an already-parsed JSON object
    """

    headers: Headers = field(default_factory=dict)
    body: str | dict[str, Any] | None = None


@runtime_checkable
class Sender(Protocol):
    """User-supplied function that transmits headers and body.

    Returns an outcome (typically a success flag) asynchronously. Timeouts,
    retries, and cancellation are the sender's responsibility.
    """

    async def __call__(self, headers: Headers, body: Any) -> Any: ...


Serializer = Callable[["CloudEvent"], Message]
Invoker = Callable[[Sender, Message], Any]
Receiver = Callable[[Message, "Version | None"], "CloudEvent"]


@dataclass(frozen=True)
class Binding:
    """The four operations a transport binding provides."""

    binary: Serializer
    structured: Serializer
    send: Invoker
    receive: Receiver
