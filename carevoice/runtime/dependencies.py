"""Runtime dependency construction for the credential/config endpoints."""

from __future__ import annotations

import logging

import httpx

from carevoice.state import RuntimeDeps
from carevoice.state.settings import AppSettings
from carevoice.realtime.providers import VoiceProvider
from carevoice.handlers.provider_store import VoiceProviderStore

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    default = VoiceProvider.parse(settings.voice.default_provider) or VoiceProvider.OPENAI
    logger.info("runtime: default voice provider %s", default.value)
    return RuntimeDeps(
        settings=settings,
        provider_store=VoiceProviderStore(default=default),
        http_client=httpx.AsyncClient(timeout=settings.api.timeout_s),
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
