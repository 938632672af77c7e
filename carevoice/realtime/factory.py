"""Build the voice engine for a new conversation session."""

from __future__ import annotations

import logging
from typing import Any

from carevoice.audio import AudioInterface
from carevoice.state.settings import VoiceSettings

from .engine import ConnectFn, VoiceEngine
from .resolver import ProviderResolver
from .providers import VoiceProvider, provider_for_model
from .callbacks import VoiceEngineCallbacks
from .credentials import CredentialsClient
from .sarvam_engine import SarvamVoiceEngine
from .openai_engine import OpenAIVoiceEngine

logger = logging.getLogger(__name__)


async def create_voice_engine(
    callbacks: VoiceEngineCallbacks,
    model_id: str | None = None,
    *,
    settings: VoiceSettings,
    credentials: CredentialsClient,
    resolver: ProviderResolver | None = None,
    audio: AudioInterface | None = None,
    connect_fn: ConnectFn | None = None,
) -> VoiceEngine:
    """Resolve the provider once and instantiate the matching adapter.

    The runtime flag (via `resolver`) sets the default; a model that pins its
    own provider in the model table wins over it.
    """
    default = VoiceProvider.parse(settings.default_provider) or VoiceProvider.OPENAI
    if resolver is not None:
        default = await resolver.resolve()
    provider = provider_for_model(model_id, default)

    common: dict[str, Any] = {"credentials": credentials, "audio": audio, "connect_fn": connect_fn}
    logger.info("voice engine: provider=%s model=%s", provider.value, model_id)
    if provider is VoiceProvider.SARVAM:
        return SarvamVoiceEngine(callbacks, settings=settings.sarvam, **common)
    return OpenAIVoiceEngine(callbacks, settings=settings.openai, **common)


__all__ = ["create_voice_engine"]
