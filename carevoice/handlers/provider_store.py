"""Runtime-settable voice provider flag."""

from __future__ import annotations

import asyncio
import logging

from carevoice.realtime.providers import VoiceProvider

logger = logging.getLogger(__name__)


class VoiceProviderStore:
    def __init__(self, *, default: VoiceProvider) -> None:
        self._default = default
        self._value: VoiceProvider | None = None
        self._lock = asyncio.Lock()

    @property
    def default(self) -> VoiceProvider:
        return self._default

    def get(self) -> VoiceProvider:
        return self._value or self._default

    async def set(self, provider: VoiceProvider) -> VoiceProvider:
        async with self._lock:
            previous = self.get()
            self._value = provider
        if previous is not provider:
            logger.info("voice provider changed: %s -> %s", previous.value, provider.value)
        return provider


__all__ = ["VoiceProviderStore"]
