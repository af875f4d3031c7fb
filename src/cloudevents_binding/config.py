"""Binding configuration.

Values come from the constructor or from environment variables:

- CLOUDEVENTS_MODE: content mode for emitting ("binary" or "structured")
- CLOUDEVENTS_TARGET_URL: where an Emitter built from config POSTs events
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .constants import Mode

ENV_MODE = "CLOUDEVENTS_MODE"
ENV_TARGET_URL = "CLOUDEVENTS_TARGET_URL"


@dataclass(frozen=True)
class BindingConfig:
    """Configuration for emitting and receiving CloudEvents over HTTP."""

    mode: Mode = Mode.BINARY
    target_url: str | None = None
    # Passed to httpx when the emitter creates its own client
    timeout: float = 30.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BindingConfig:
        """Build a config from environment variables.

        Raises:
            ValueError: If a variable holds an unknown mode
        """
        env = os.environ if environ is None else environ
        mode = env.get(ENV_MODE, "").strip().lower()
        try:
            return cls(
                mode=Mode(mode) if mode else Mode.BINARY,
                target_url=env.get(ENV_TARGET_URL) or None,
            )
        except ValueError as e:
            raise ValueError(f"Invalid CloudEvents configuration: {e}") from e
