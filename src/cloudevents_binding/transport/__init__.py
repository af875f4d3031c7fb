"""HTTP integration for the binding.

- server: starlette requests to CloudEvents, and a receiving endpoint
- client: an httpx-backed Sender
"""

from .client import httpx_sender
from .server import cloudevent_endpoint, message_from_request, response_from_message

__all__ = [
    "cloudevent_endpoint",
    "httpx_sender",
    "message_from_request",
    "response_from_message",
]
