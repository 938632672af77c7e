"""Runtime voice-provider flag with a short-lived cache."""

from __future__ import annotations

import time
import logging
from collections.abc import Callable

from .providers import VoiceProvider
from .credentials import CredentialsClient

logger = logging.getLogger(__name__)


class ProviderResolver:
    """Read the admin-selected provider once per engine construction.

    A successful lookup or the environment fallback is cached for `cache_s`
    seconds. Any failure falls back to `default`.
    """

    def __init__(
        self,
        credentials: CredentialsClient,
        *,
        default: VoiceProvider,
        cache_s: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._credentials = credentials
        self._default = default
        self._cache_s = max(0.0, float(cache_s))
        self._clock = clock
        self._cached: tuple[VoiceProvider, float] | None = None

    @property
    def default(self) -> VoiceProvider:
        return self._default

    def invalidate(self) -> None:
        self._cached = None

    async def resolve(self) -> VoiceProvider:
        now = self._clock()
        if self._cached is not None and now - self._cached[1] < self._cache_s:
            return self._cached[0]

        provider: VoiceProvider | None = None
        try:
            provider = VoiceProvider.parse(await self._credentials.fetch_voice_provider())
        except Exception as exc:
            logger.warning("failed to fetch voice provider config: %s", exc)
        if provider is None:
            provider = self._default

        self._cached = (provider, now)
        return provider


__all__ = ["ProviderResolver"]
