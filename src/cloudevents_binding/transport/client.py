"""httpx-backed Sender.

The binding never performs I/O itself; ``httpx_sender`` builds the
user-supplied function it invokes. Timeouts and retries belong to the
``httpx.AsyncClient`` the caller passes in.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..message import Headers, Sender

logger = logging.getLogger(__name__)


def httpx_sender(client: httpx.AsyncClient, url: str, method: str = "POST") -> Sender:
    """Create a Sender that transmits messages with an httpx client.

    Args:
        client: Client to send with; the caller owns its lifecycle
        url: Target URL (absolute, or relative to the client's base_url)
        method: HTTP method

    Returns:
        Async sender resolving to True for 2xx responses
    """

    async def send(headers: Headers, body: Any) -> bool:
        if isinstance(body, dict):
            response = await client.request(method, url, headers=headers, json=body)
        else:
            content = (body or "").encode("utf-8")
            response = await client.request(method, url, headers=headers, content=content)
        if not response.is_success:
            logger.warning(f"CloudEvent delivery to {url} failed: HTTP {response.status_code}")
        return response.is_success

    return send
