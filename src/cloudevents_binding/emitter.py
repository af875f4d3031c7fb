"""Emitter: serialize and send in one call.

Usage:
    emitter = Emitter(sender, mode=Mode.STRUCTURED)
    ok = await emitter.send(event)

Or from environment configuration (see ``config.py``):
    async with httpx.AsyncClient() as client:
        emitter = Emitter.from_config(BindingConfig.from_env(), client)
        await emitter.send(event)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import BindingConfig
from .constants import Mode
from .event import CloudEvent
from .http import HTTP
from .message import Binding, Message, Sender
from .transport.client import httpx_sender

logger = logging.getLogger(__name__)


class Emitter:
    """Sends CloudEvents through a user-supplied sender in a fixed content mode."""

    def __init__(self, sender: Sender, mode: Mode | str = Mode.BINARY, binding: Binding = HTTP):
        self.sender = sender
        self.mode = Mode(mode)
        self.binding = binding

    @classmethod
    def from_config(cls, config: BindingConfig, client: httpx.AsyncClient) -> Emitter:
        """Create an emitter that POSTs to ``config.target_url`` with ``client``.

        Raises:
            ValueError: If the config has no target URL
        """
        if not config.target_url:
            raise ValueError("BindingConfig.target_url is required to build an emitter")
        return cls(httpx_sender(client, config.target_url), mode=config.mode)

    def serialize(self, event: CloudEvent) -> Message:
        """Convert an event to a message in this emitter's content mode."""
        if self.mode is Mode.STRUCTURED:
            return self.binding.structured(event)
        return self.binding.binary(event)

    async def send(self, event: CloudEvent) -> Any:
        """Serialize an event and hand it to the sender.

        Returns:
            Whatever the sender returns
        """
        message = self.serialize(event)
        logger.debug(f"Emitting CloudEvent {event.id!r} ({event.type}) in {self.mode.value} mode")
        return await self.binding.send(self.sender, message)


async def emit(event: CloudEvent, sender: Sender, mode: Mode | str = Mode.BINARY) -> Any:
    """Send a single event without keeping an Emitter around."""
    return await Emitter(sender, mode).send(event)
